"""Staff residence permit tracking and expiry notification service."""
