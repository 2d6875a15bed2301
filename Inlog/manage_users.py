# backend/manage_users.py  ─── python -m Inlog.manage_users --help
import getpass

import typer
from sqlmodel import Session, select
from tabulate import tabulate

from errors import ApiError
from Inlog.accounts import register_user
from Inlog.database import get_engine, init_db
from Inlog.models import RegisterIn, User
from Inlog.auth import PERMISSIONS
from Voorraad.seed import seed as seed_data

cli = typer.Typer(help="Sweet Shop gebruikersbeheer")


@cli.callback()
def main():
    init_db()


@cli.command()
def add(
    username: str = typer.Argument(...),
    email: str = typer.Option(..., help="E-mailadres (uniek)"),
    role: str = typer.Option("user", help="Rol van de gebruiker"),
):
    """Voeg een nieuwe gebruiker toe."""
    if role not in PERMISSIONS:
        typer.echo(f"❌ Onbekende rol, kies uit: {', '.join(PERMISSIONS)}"); raise typer.Exit(1)
    pwd = getpass.getpass("Password: ")
    with Session(get_engine()) as s:
        try:
            register_user(RegisterIn(username=username, email=email, password=pwd), s, role=role)
        except ApiError as exc:
            typer.echo(f"❌ {exc.detail}"); raise typer.Exit(1)
    typer.echo("✅ Aangemaakt")


@cli.command()
def delete(username: str):
    """Verwijder een gebruiker."""
    with Session(get_engine()) as s:
        user = s.exec(select(User).where(User.username == username)).first()
        if not user: typer.echo("❌ Niet gevonden"); raise typer.Exit(1)
        s.delete(user); s.commit(); typer.echo("🗑️  Verwijderd")


@cli.command("list")
def list_users(
    full: bool = typer.Option(False, help="Toon hashes erbij"),
    show_role: bool = typer.Option(True, help="Toon de role-kolom"),
):
    """Lijst alle gebruikers (id, username, email, role, optioneel hash)."""
    cols = [User.id, User.username, User.email]
    headers = ["id", "username", "email"]

    if show_role:
        cols.append(User.role)
        headers.append("role")

    if full:
        cols.append(User.hashed_password)
        headers.append("hashed_password")

    with Session(get_engine()) as s:
        rows = s.exec(select(*cols)).all()

    typer.echo(tabulate(rows, headers=headers))


@cli.command()
def seed():
    """Admin-account en voorbeeldsnoep aanmaken (idempotent)."""
    with Session(get_engine()) as s:
        created = seed_data(s)
    if created["admin"]:
        typer.echo("👤 admin@example.com / admin123 aangemaakt")
    typer.echo(f"🍬 {len(created['sweets'])} voorbeeld(en) toegevoegd")


if __name__ == "__main__":
    cli()
