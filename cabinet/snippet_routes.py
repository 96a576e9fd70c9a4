"""API routes for saved topology snippets."""

from fastapi import APIRouter, HTTPException

from netbuild.models.snippet import Snippet, SnippetCreate
from netbuild.utils.identifiers import utc_timestamp
from cabinet.snippet_db import (
    insert_snippet as db_insert_snippet,
    get_snippet as db_get_snippet,
    list_snippets as db_list_snippets,
    delete_snippet as db_delete_snippet,
)

router = APIRouter()


@router.get("/snippets")
def list_snippets() -> list[Snippet]:
    """list all saved snippets, newest first."""
    return db_list_snippets()


@router.get("/snippets/{snippet_id}")
def get_snippet(snippet_id: int) -> Snippet:
    """get a single snippet."""
    snippet = db_get_snippet(snippet_id)
    if not snippet:
        raise HTTPException(status_code=404, detail=f"Snippet not found: {snippet_id}")
    return snippet


@router.post("/snippets", status_code=201)
def create_snippet(request: SnippetCreate) -> Snippet:
    """save a new snippet.

    The content is stored as-is; id and created_at are assigned here.
    Snippets are never updated, only created and deleted.
    """
    title = request.title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="Title must not be empty")
    return db_insert_snippet(title, request.content, utc_timestamp())


@router.delete("/snippets/{snippet_id}")
def delete_snippet(snippet_id: int) -> dict:
    """delete a snippet."""
    if not db_get_snippet(snippet_id):
        raise HTTPException(status_code=404, detail=f"Snippet not found: {snippet_id}")
    db_delete_snippet(snippet_id)
    return {"deleted": snippet_id}
