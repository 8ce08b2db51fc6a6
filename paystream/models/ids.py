import uuid

def generate_id() -> str:
    """Opaque record id in the `id_<hex>` form used across all tables."""
    return f"id_{uuid.uuid4().hex[:16]}"
