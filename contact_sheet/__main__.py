from .cli.__main__ import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
