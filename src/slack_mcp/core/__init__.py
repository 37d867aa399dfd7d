"""Core building blocks: errors, responses, resilience and observability."""
