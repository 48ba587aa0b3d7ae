from __future__ import annotations  # Re-export backend_gateway public API

from .assignment_client import SUBMIT_PATHS, AssignmentClient, GenerationReply
from .backend_gateway import HttpClient, HttpResponse, post_json

__all__ = ["AssignmentClient", "GenerationReply", "SUBMIT_PATHS", "HttpClient", "HttpResponse", "post_json"]
