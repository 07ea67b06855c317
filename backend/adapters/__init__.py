"""External service adapters: mail transport and file storage."""
