#!/usr/bin/env python3
"""
Database Reset Script
Drop and recreate every reservation table

Notes:
- Works against whatever DATABASE_URL points at (SQLite file by default)
- This script only resets database structure, does not seed data
- To seed data, run `python script/seed_data.py`
"""

import asyncio

from bus_reservation.platform.config.core_setting import settings
from bus_reservation.platform.database.orm_db_setting import Database


async def main():
    print('🔄 Starting database reset...')
    print('=' * 50)
    print(f'Database URL: {settings.DATABASE_URL}')

    database = Database()
    try:
        print('🗑️ Dropping tables...')
        await database.drop_tables()
        print('🏗️ Creating tables...')
        await database.create_db_and_tables()

        print('=' * 50)
        print('✅ Database reset completed!')
        print('💡 To seed data, run: python script/seed_data.py')

    except Exception as e:
        print(f'❌ Reset failed: {e}')
        exit(1)

    finally:
        await database.dispose()


if __name__ == '__main__':
    asyncio.run(main())
