import asyncio

from dotenv import load_dotenv

load_dotenv()

from inbox_autolabel.app.run import run_session
from inbox_autolabel.config.settings import load_settings


def main() -> None:
    settings = load_settings()
    print(f"[auto-label] Opening {settings.gmail_url} (headless={settings.headless})")

    try:
        summary = asyncio.run(run_session(settings=settings, verbose=True))
    except KeyboardInterrupt:
        print("\n[auto-label] Stopped.")
        return

    print(
        f"[session] runs={summary['runs']} created={summary['created']} "
        f"updated={summary['updated']} unchanged={summary['unchanged']} "
        f"noop={summary['noop']} failed={summary['failed']}"
    )


if __name__ == "__main__":
    main()
