from invoicer.cli.app import main_menu
from invoicer.db import initialize_db, open_connection
from invoicer.logging import configure_logging, reconfigure


def main() -> None:
    configure_logging(interactive=True)
    initialize_db()
    reconfigure(interactive=True)
    with open_connection() as conn:
        main_menu(conn)


if __name__ == "__main__":
    main()
