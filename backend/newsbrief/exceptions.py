"""Exception types raised across the fetch pipeline and stores."""


class NewsBriefError(Exception):
    """Base class for application errors."""


class ConfigurationError(NewsBriefError):
    """Required external configuration is missing."""


class ArticleSourceError(NewsBriefError):
    """The article source provider failed or answered with an error state."""


class CompletionError(NewsBriefError):
    """The summary completion endpoint failed or reported an error."""


class FetchInProgressError(NewsBriefError):
    """Another fetch run is still executing."""


class CategoryError(NewsBriefError):
    """Base class for category store violations."""


class CategoryNotFoundError(CategoryError):
    """No category with the given id."""


class DefaultCategoryError(CategoryError):
    """Built-in categories cannot be renamed, edited or deleted."""


class DuplicateCategoryError(CategoryError):
    """A category with the same name already exists."""


class CategoryLimitError(CategoryError):
    """The maximum number of categories has been reached."""
