# Services package init
"""
Notes API: Services Layer
=========================

What:  Business logic between routes (HTTP) and the database / upstream API.

Service Inventory:
    - NoteService: title validation, note creation and listing
    - PostsClient: fetch-and-truncate proxy over the third-party posts source

Services raise the exceptions from notes_api.exceptions and never build
HTTP responses; the global handlers in main.py do that.
"""
