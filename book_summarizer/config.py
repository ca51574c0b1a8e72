import os
from dotenv import load_dotenv
from pathlib import Path

# Load environment variables from .env file
load_dotenv()

# Project paths
ROOT_DIR = Path(__file__).parent.parent.absolute()
DATA_DIR = os.getenv("DATA_DIR", os.path.join(ROOT_DIR, 'data'))
UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(DATA_DIR, 'uploads'))
LOG_DIR = os.getenv("LOG_DIR", os.path.join(ROOT_DIR, 'logs'))

# Create directories if they don't exist
os.makedirs(DATA_DIR, exist_ok=True)
os.makedirs(UPLOAD_DIR, exist_ok=True)

# Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")
SUPABASE_TABLE = os.getenv("SUPABASE_TABLE", "summaries")
# Unset means the store calls may block indefinitely
SUPABASE_TIMEOUT = float(os.getenv("SUPABASE_TIMEOUT")) if os.getenv("SUPABASE_TIMEOUT") else None

# API Keys
DEEPSEEK_API_KEY = os.getenv("DEEPSEEK_API_KEY")
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY")

# LLM Configuration
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "deepseek")
LLM_MODEL = os.getenv("LLM_MODEL", "deepseek-chat")
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://api.deepseek.com")
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "1.0"))

# Server Configuration
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
METRICS_PORT = int(os.getenv("METRICS_PORT", "8001"))
MAX_BODY_SIZE = int(os.getenv("MAX_BODY_SIZE", str(50 * 1024 * 1024)))

SUMMARY_EVALUATION_PROMPT = os.getenv(
    "SUMMARY_EVALUATION_PROMPT",
    """
    Evaluate the provided chapter content against the 5C principles and summarize it.

    - **Clarity**: Language is clear and straightforward.
    - **Cohesion**: There is a logical flow between ideas.
    - **Coverage**: Most, but not all, vital points are included.
    - **Granularity**: The level of detail is appropriate.
    - **Storytelling**: The narrative is natural and engaging.

    # Steps

    1. Read the chapter and write a concise summary of its main points.
    2. Score the chapter on each of the five principles from 0 to 10.
    3. Give an overall score from 0 to 10.

    # Output Format

    Respond with a single JSON object and nothing else:
    {
      "summary": "<concise chapter summary>",
      "clarity_score": <number>,
      "cohesion_score": <number>,
      "coverage_score": <number>,
      "granularity_score": <number>,
      "storytelling_score": <number>,
      "overall_score": <number>
    }
    """
)
