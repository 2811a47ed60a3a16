import logging

from . import config
from .app import create_app


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    app = create_app()
    app.run(host=config.HOST, port=config.PORT, debug=True)


if __name__ == "__main__":
    main()
