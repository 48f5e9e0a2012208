#!/usr/bin/env python3
"""
Database initialization script for SkorZen School Portal
Creates the tables and the default administrator account
"""

import sys

from app import create_app
from database import init_db, reset_database

def main():
    """Main function to initialize database"""
    app = create_app()

    if len(sys.argv) > 1 and sys.argv[1] == '--reset':
        print("PERINGATAN: Semua data nilai, siswa, dan guru akan dihapus!")
        confirm = input("Yakin ingin mengatur ulang database? (ya/tidak): ")
        if confirm.lower() == 'ya':
            reset_database(app)
            print("Database berhasil diatur ulang.")
        else:
            print("Pengaturan ulang database dibatalkan.")
    else:
        init_db(app)
        print("Database siap digunakan.")

if __name__ == '__main__':
    main()
