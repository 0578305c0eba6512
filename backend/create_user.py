#!/usr/bin/env python3
"""
Create a user directly in the credential store.

Useful for seeding an admin, or the fixture account the frontend's demo
login expects.

Usage:
    python create_user.py --email admin@example.com --name "Admin" --role Admin
    python create_user.py --test-user   # test@example.com / Test@1234, role Admin

The password is prompted for unless --password is given.
"""

import argparse
import getpass
import sys

from rich.console import Console

from api.dependencies import ServiceContainer
from modules.auth.exceptions import DuplicateIdentityError
from modules.auth.models import NewUser, UserRole
from modules.auth.passwords import hash_password
from shared.exceptions import DashboardError

console = Console()

TEST_USER = {
    "name": "Test User",
    "email": "test@example.com",
    "password": "Test@1234",
    "role": UserRole.ADMIN,
}


def create_user(
    container: ServiceContainer,
    name: str,
    email: str,
    password: str,
    role: UserRole = UserRole.STANDARD,
) -> bool:
    """
    Hash the password and store the user.

    Returns:
        True if the user was created, False if the email already exists

    Raises:
        ValidationError: If the password does not meet the length rules
    """
    settings = container.settings
    digest = hash_password(password, settings.bcrypt_rounds, settings.password_min_length)
    try:
        user = container.store.create(
            NewUser(name=name, email=email, password_digest=digest, role=role)
        )
    except DuplicateIdentityError:
        return False
    console.print(f"[green]✓[/green] Created {user.email} ({user.role.value}), id {user.id}")
    return True


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Create a privacy dashboard user")
    parser.add_argument("--test-user", action="store_true", help="Create the test@example.com fixture user")
    parser.add_argument("--email", help="Email address")
    parser.add_argument("--name", help="Display name")
    parser.add_argument("--password", help="Password (prompted if omitted)")
    parser.add_argument(
        "--role",
        choices=[r.value for r in UserRole],
        default=UserRole.STANDARD.value,
        help="Account role",
    )
    args = parser.parse_args()

    if args.test_user:
        fields = dict(TEST_USER)
    else:
        if not args.email or not args.name:
            parser.error("--email and --name are required unless --test-user is given")
        password = args.password or getpass.getpass("Password: ")
        fields = {
            "name": args.name,
            "email": args.email,
            "password": password,
            "role": UserRole(args.role),
        }

    container = ServiceContainer()
    try:
        created = create_user(container, **fields)
    except DashboardError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        sys.exit(1)
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    finally:
        container.close()

    if not created:
        console.print(f"[yellow]User {fields['email']} already exists[/yellow]")


if __name__ == "__main__":
    main()
