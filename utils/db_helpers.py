"""
Database helper utilities for SkorZen School Portal
"""

import logging

from database import db, handle_db_error
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)

@handle_db_error
def safe_add_and_commit(obj):
    """Safely add object to database with error handling"""
    try:
        db.session.add(obj)
        db.session.commit()
        return True, "Data berhasil disimpan"
    except IntegrityError as e:
        db.session.rollback()
        logger.warning("Integrity error while adding %r: %s", obj, e.orig)
        if 'UNIQUE constraint failed' in str(e) or 'unique' in str(e).lower():
            return False, "Data dengan identitas yang sama sudah ada"
        return False, "Data melanggar batasan database"

@handle_db_error
def safe_delete_and_commit(obj):
    """Safely delete object from database with error handling"""
    db.session.delete(obj)
    db.session.commit()
    return True, "Data berhasil dihapus"

@handle_db_error
def safe_update_and_commit():
    """Safely commit pending changes with error handling"""
    try:
        db.session.commit()
        return True, "Data berhasil diperbarui"
    except IntegrityError as e:
        db.session.rollback()
        logger.warning("Integrity error while updating: %s", e.orig)
        if 'UNIQUE constraint failed' in str(e) or 'unique' in str(e).lower():
            return False, "Data duplikat ditemukan"
        return False, "Data melanggar batasan database"

def paginate_query(query, page=1, per_page=15):
    """Paginate query results"""
    return query.paginate(page=page, per_page=per_page, error_out=False)

class ListPagination:
    """Pagination over an already materialized list, mirroring Flask-SQLAlchemy's API"""

    def __init__(self, items, page, per_page):
        self.total = len(items)
        self.per_page = per_page
        self.pages = max(1, (self.total + per_page - 1) // per_page)
        self.page = min(max(1, page), self.pages)
        start = (self.page - 1) * per_page
        self.items = items[start:start + per_page]
        self.has_prev = self.page > 1
        self.has_next = self.page < self.pages
        self.prev_num = self.page - 1 if self.has_prev else None
        self.next_num = self.page + 1 if self.has_next else None

    def iter_pages(self, left_edge=2, right_edge=2, left_current=2, right_current=3):
        last = 0
        for num in range(1, self.pages + 1):
            if (num <= left_edge or
                    (self.page - left_current - 1 < num < self.page + right_current) or
                    num > self.pages - right_edge):
                if last + 1 != num:
                    yield None
                yield num
                last = num
