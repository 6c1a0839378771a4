"""
Transactional operations backing the SQL data service and the local auth
adapter. Every public function runs inside ``@transactional``.
"""
