class ScraperError(Exception):
    """Base class for application errors raised by the scraper."""


class UnknownRegionError(ScraperError):
    """Status requested for a region that is not in the registry."""


class ProtocolError(ScraperError):
    """The channel client delivered something the scraper can't accept."""


class HistoryFetchError(ScraperError):
    """The channel client failed while paging through history."""


class MessageParseError(ScraperError):
    """A status line matched the grammar but carries an impossible time."""
