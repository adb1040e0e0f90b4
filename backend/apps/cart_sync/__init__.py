"""Client side of the cart flow: keeps a local cart snapshot in step with the cart API."""
