"""
Run the API server: ``python -m tupplur``.

Port, backend and super-user key come from the environment (see config.py).
"""
import uvicorn

from tupplur.config import get_settings


def main() -> None:
    settings = get_settings()
    if not settings.super_user_key:
        raise SystemExit("SUPER_USER_KEY is not defined")
    uvicorn.run("tupplur.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
