"""Navigation core: content shapes, tree building and the navigation service."""
