# /run.py

import subprocess
import os
import sys

from catalog import config

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def run_fastapi(reload: bool = False):
  command = [sys.executable, "-m", "uvicorn", "catalog.main:app", "--host", config.HOST, "--port", str(config.PORT)]
  if reload:
    command.append("--reload")
  subprocess.run(command, cwd=BASE_DIR)

if __name__ == "__main__":
  run_fastapi(reload=config.APP_ENV == "development")
