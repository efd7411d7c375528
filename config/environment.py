import os
from dotenv import load_dotenv

load_dotenv()

environment = os.getenv("APP_ENV", "development")

db_URI = os.getenv("DATABASE_URL", "sqlite:///./dressify.db")

secret = os.getenv("JWT_SECRET", "dressify-dev-secret-change-me")
token_expire_days = int(os.getenv("JWT_EXPIRE_DAYS", "7"))

# Cost factor for password hashing (4 is the minimum bcrypt accepts)
bcrypt_rounds = int(os.getenv("BCRYPT_ROUNDS", "12"))

frontend_url = os.getenv("FRONTENDURL")

log_level = os.getenv("APP_LOG_LEVEL", "INFO")
log_file = os.getenv("APP_LOG_FILE")

cloudinary_cloud_name = os.getenv("CLOUDINARY_CLOUD_NAME")
cloudinary_api_key = os.getenv("CLOUDINARY_API_KEY")
cloudinary_api_secret = os.getenv("CLOUDINARY_API_SECRET")


def is_production():
    return environment == "production"
