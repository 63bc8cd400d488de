"""Single-switch row/column scanning keyboard."""
