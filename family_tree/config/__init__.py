from family_tree.config.settings import settings

__all__ = ["settings"]
