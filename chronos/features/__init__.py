"""Feature modules (CRUD API slices)"""
