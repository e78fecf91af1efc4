from .catalog import CatalogStore, QuizDraft, default_catalog_path

__all__ = ["CatalogStore", "QuizDraft", "default_catalog_path"]
