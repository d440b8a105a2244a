"""
Create a contributor account from the command line.

Example:
    python init_account.py alice --password s3cret-pass
"""
import argparse
import asyncio
import getpass

from media_vault.infrastructure.database.session import dispose_engine, get_session, init_db
from media_vault.modules.accounts import AccountAlreadyExistsError, AccountCreateInput, AccountService


async def create_account(username: str, password: str) -> None:
    await init_db()
    try:
        async for db in get_session():
            service = AccountService.with_session(db)
            try:
                account = await service.create_account(AccountCreateInput(username=username, password=password))
            except AccountAlreadyExistsError:
                print(f"Account already exists: {username}")
                return
            await db.commit()
            print(f"Created account {account.username} ({account.id})")
    finally:
        await dispose_engine()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a Media Vault contributor account")
    parser.add_argument("username")
    parser.add_argument("--password", help="prompted for when omitted")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    asyncio.run(create_account(args.username, password))


if __name__ == "__main__":
    main()
