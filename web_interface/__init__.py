"""Web surface for the Physics IDE block compiler."""
