# barbershop/__main__.py

import argparse

import uvicorn


def main(argv=None):
    """Serve the API: `python -m barbershop` or the `barbershop` script."""
    parser = argparse.ArgumentParser(prog="barbershop")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true")
    args = parser.parse_args(argv)

    uvicorn.run("barbershop.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
