"""Controllers: request data in, ``(data, status, headers)`` out."""
