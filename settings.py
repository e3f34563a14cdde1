# settings.py - Runtime configuration, read from the environment
import os

# Database parameters
MONGODB_URI = os.environ.get("MONGODB_URI", "mongodb://localhost:27017")
MONGODB_DATABASE = os.environ.get("MONGODB_DATABASE", "graphstaff")

# Token parameters
JWT_SECRET = os.environ.get("JWT_SECRET", "")  # Must be set before startup
JWT_ALGORITHM = "HS256"
TOKEN_EXPIRE_DAYS = int(os.environ.get("TOKEN_EXPIRE_DAYS", 7))

# Password hashing
BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", 10))

# Query cache
CACHE_TTL_SECONDS = float(os.environ.get("CACHE_TTL_SECONDS", 60))
CACHE_MAX_ENTRIES = int(os.environ.get("CACHE_MAX_ENTRIES", 1000))

# Rate limiting, per client address
RATE_LIMIT_REQUESTS = int(os.environ.get("RATE_LIMIT_REQUESTS", 1000))
RATE_LIMIT_WINDOW_SECONDS = float(os.environ.get("RATE_LIMIT_WINDOW_SECONDS", 60))
RATE_LIMIT_MAX_CLIENTS = int(os.environ.get("RATE_LIMIT_MAX_CLIENTS", 10000))

# Pagination
DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = int(os.environ.get("MAX_PAGE_LIMIT", 100))

# Service parameters
FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", 4000))

# Seed accounts
SEED_ADMIN_USERNAME = os.environ.get("SEED_ADMIN_USERNAME", "admin")
SEED_ADMIN_PASSWORD = os.environ.get("SEED_ADMIN_PASSWORD", "admin123")
SEED_ADMIN_EMAIL = os.environ.get("SEED_ADMIN_EMAIL", "admin@graphstaff.local")
SEED_EMPLOYEE_USERNAME = os.environ.get("SEED_EMPLOYEE_USERNAME", "john")
SEED_EMPLOYEE_PASSWORD = os.environ.get("SEED_EMPLOYEE_PASSWORD", "employee123")
