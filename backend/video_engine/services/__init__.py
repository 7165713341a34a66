"""Services - generation pipeline, infrastructure adapters and use cases."""
