# run_server.py
import os, sys, traceback, faulthandler
from pathlib import Path

# crash log sits next to the exe when frozen, next to this file otherwise
BASE_DIR = Path(sys.executable).resolve().parent if getattr(sys, "frozen", False) else Path(__file__).resolve().parent
LOG_FILE = BASE_DIR / "carledger_crash.log"

faulthandler.enable(open(LOG_FILE, "a", encoding="utf-8"))


def log(msg: str):
    with open(LOG_FILE, "a", encoding="utf-8") as f:
        f.write(msg + "\n")


def main():
    try:
        log("\n--- carledger start ---")
        log(f"cwd={os.getcwd()}")

        import uvicorn
        from sqlalchemy.engine import make_url

        # config and app are imported after crash logging is ready
        from carledger.core import config
        from main import app

        log(f"env_file={config.BASE_DIR / '.env'}")
        log(f"database={make_url(config.DATABASE_URL).render_as_string(hide_password=True)}")
        log(f"listen={config.APP_HOST}:{config.APP_PORT} log_level={config.LOG_LEVEL}")

        uvicorn.run(app, host=config.APP_HOST, port=config.APP_PORT, reload=False, log_level=config.LOG_LEVEL.lower())

    except Exception:
        err = traceback.format_exc()
        log(err)
        print(err)
        if sys.stdin and sys.stdin.isatty():
            input("\nPress Enter to exit...")
        raise


if __name__ == "__main__":
    main()
