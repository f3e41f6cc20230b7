#!/usr/bin/env python3
"""
Verification: ensure all runtime dependencies are installed and importable.
Run from the project root:  python verify_install.py
"""
import sys

PACKAGES = [
    ("fastapi", "FastAPI"),
    ("uvicorn", "uvicorn"),
    ("pydantic", "pydantic"),
    ("pymongo", "pymongo"),
    ("httpx", "httpx"),
    ("groq", "groq"),
    ("json5", "json5"),
    ("dotenv", "python-dotenv"),
]


def main():
    failed = []
    for module, name in PACKAGES:
        try:
            __import__(module)
            print(f"  OK  {name}")
        except ImportError as e:
            print(f"  FAIL {name}: {e}")
            failed.append(name)
    if failed:
        print("\nInstall missing packages:  pip install -e .")
        return 1
    print("\nAll dependencies OK.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
