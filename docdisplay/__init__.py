"""Directory tree browsing, rendering and document search."""
