#!/usr/bin/env python3
"""
People Database CLI - Command-line interface for common operations.

Usage:
    python cli.py init-db              # Initialize database
    python cli.py reset-db             # Reset database (DESTRUCTIVE!)
    python cli.py health               # Check system health
    python cli.py list                 # Show all records
    python cli.py add <name> <age>     # Add a record
    python cli.py remove <id>          # Remove a record
    python cli.py serve [host] [port]  # Run the web UI
"""
import sys
from typing import Optional

from app.config import get_settings
from app.db.sqlite import init_db, check_db_health
from app.deps import build_store
from app.errors import PersonInputError
from app.services.validation import parse_person_input


def print_header(text: str):
    """Print formatted header."""
    print(f"\n{'=' * 60}")
    print(f"  {text}")
    print(f"{'=' * 60}\n")


def print_status(key: str, value, indent: int = 0):
    """Print formatted status line."""
    spaces = "  " * indent
    print(f"{spaces}{key:30s}: {value}")


def cmd_init_db(reset: bool = False):
    """Initialize or reset database."""
    print_header("Database Initialization")

    if reset:
        print("⚠️  WARNING: This will delete all data!")
        confirm = input("Type 'yes' to confirm: ")
        if confirm.lower() != "yes":
            print("Aborted.")
            return

    init_db(drop_all=reset)
    print("✓ Database initialized successfully")


def cmd_health():
    """Check system health."""
    print_header("System Health Check")

    settings = get_settings()

    print("Configuration:")
    print_status("Database URL", settings.DATABASE_URL, 1)
    print_status("Storage Key", settings.STORAGE_KEY, 1)
    print_status("Id Strategy", settings.ID_STRATEGY, 1)

    print("\nDatabase:")
    db_health = check_db_health()

    if db_health.get("status") == "healthy":
        print_status("Status", "✓ Healthy", 1)
        store = build_store(settings)
        print_status("Records", len(store), 1)
        if store.load_error:
            print_status("Stored Data", f"✗ Unreadable: {store.load_error}", 1)
    else:
        print_status("Status", f"✗ Unhealthy: {db_health.get('error')}", 1)

    print()


def cmd_list():
    """Show all records in display order."""
    print_header("Database Records")

    store = build_store(get_settings())
    if store.load_error:
        print(f"⚠️  Stored data unreadable: {store.load_error}\n")

    if not store.people:
        print("No records found")
        print()
        return

    print(f"{'ID':34s}{'Name':30s}{'Age':>5s}  Added")
    for person in store.people:
        print(f"{person.id:34s}{person.name:30s}{person.age:>5d}  {person.created_at}")
    print()


def cmd_add(name: str, age: str):
    """Validate and add a record."""
    try:
        clean_name, clean_age = parse_person_input(name, age)
    except PersonInputError as e:
        print(f"✗ {e.description}")
        sys.exit(1)

    store = build_store(get_settings())
    person = store.add(clean_name, clean_age)
    print(f"✓ {person.name} has been added to the database! (id {person.id})")


def cmd_remove(person_id: str):
    """Remove a record by id."""
    store = build_store(get_settings())
    if store.remove(person_id):
        print("✓ Person removed from database")
    else:
        print(f"Nothing to remove: no record with id {person_id}")


def cmd_serve(host: Optional[str] = None, port: Optional[int] = None):
    """Run the web UI with uvicorn."""
    import uvicorn

    settings = get_settings()
    host = host or settings.HOST
    port = port or settings.PORT
    print_header(f"Serving People Database on http://{host}:{port}")
    uvicorn.run("app.main:app", host=host, port=port, log_level=settings.LOG_LEVEL.lower())


def print_help():
    """Print help message."""
    print("""
People Database CLI

Usage:
    python cli.py <command> [options]

Commands:
    init-db              Initialize database
    reset-db             Reset database (DESTRUCTIVE!)
    health               Check system health
    list                 Show all records
    add <name> <age>     Add a record
    remove <id>          Remove a record
    serve [host] [port]  Run the web UI
    help                 Show this help message

Examples:
    python cli.py init-db
    python cli.py add "Alice" 30
    python cli.py list
    python cli.py serve 0.0.0.0 8080
""")


def main():
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        print_help()
        return

    command = sys.argv[1].lower()
    args = sys.argv[2:]

    try:
        if command == "init-db":
            cmd_init_db(reset=False)
        elif command == "reset-db":
            cmd_init_db(reset=True)
        elif command == "health":
            cmd_health()
        elif command == "list":
            cmd_list()
        elif command == "add":
            if len(args) != 2:
                print("Usage: python cli.py add <name> <age>")
                sys.exit(1)
            cmd_add(args[0], args[1])
        elif command == "remove":
            if len(args) != 1:
                print("Usage: python cli.py remove <id>")
                sys.exit(1)
            cmd_remove(args[0])
        elif command == "serve":
            host = args[0] if len(args) > 0 else None
            port = int(args[1]) if len(args) > 1 else None
            cmd_serve(host=host, port=port)
        elif command == "help":
            print_help()
        else:
            print(f"Unknown command: {command}")
            print_help()
            sys.exit(1)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        print(f"\n✗ Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
