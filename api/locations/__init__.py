"""
Location records: CRUD plus text / proximity search.
"""
