"""
Production server runner for the Catalog OData API.

Applies Alembic migrations, then runs Uvicorn with several workers using the
app factory in main.py.
"""
import multiprocessing
import os
import subprocess
import sys

import uvicorn
from dotenv import load_dotenv

load_dotenv()

# Formula: (2 x $num_cores) + 1, kept between 2 and 8 workers
CPU_COUNT = multiprocessing.cpu_count()
DEFAULT_WORKERS = min(max(2 * CPU_COUNT + 1, 2), 8)

# Configuration from environment variables
WORKERS = int(os.getenv('UVICORN_WORKERS', DEFAULT_WORKERS))
HOST = os.getenv('API_HOST', '0.0.0.0')
PORT = int(os.getenv('API_PORT', '8000'))
RELOAD = os.getenv('RELOAD', 'false').lower() == 'true'
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').lower()

TIMEOUT_KEEP_ALIVE = int(os.getenv('TIMEOUT_KEEP_ALIVE', '5'))

if __name__ == "__main__":
    if not os.getenv("DATABASE_URL", "").strip():
        print("Error: DATABASE_URL environment variable not set.")
        print("Please create a .env file with DATABASE_URL=<your-database-url>")
        sys.exit(1)

    print("Running database migrations...")
    try:
        # sys.executable keeps us on the interpreter from the venv/container
        subprocess.run([sys.executable, "-m", "alembic", "upgrade", "head"], check=True)
        print("Database migrations applied successfully\n")
    except subprocess.CalledProcessError as e:
        print(f"Error applying database migrations: {e}")
        sys.exit(1)

    print(f"""
Catalog OData API
  Workers: {WORKERS} (CPU cores: {CPU_COUNT})
  Host: {HOST}
  Port: {PORT}
  Keep-alive timeout: {TIMEOUT_KEEP_ALIVE}s

Starting server...
""")

    uvicorn.run(
        "main:create_fastapi_app",
        factory=True,
        host=HOST,
        port=PORT,
        workers=1 if RELOAD else WORKERS,
        reload=RELOAD,
        timeout_keep_alive=TIMEOUT_KEEP_ALIVE,
        log_level=LOG_LEVEL,
        access_log=True,
    )
