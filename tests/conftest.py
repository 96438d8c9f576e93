import os

# Keep test runs from writing log files; process env wins over .env
os.environ.setdefault("LOG_DIR", "")
