"""Row and edge generation."""
