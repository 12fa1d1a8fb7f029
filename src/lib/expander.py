"""
Stream expander: the include filter as a text stream

IncludeFilter wraps a source text stream. On the first read it freezes its
configuration, drains the whole source into memory, runs one include
expansion pass over it and then serves the expanded text unit by unit.

States (see FilterState):

    UNCONFIGURED --first read--> INITIALIZED --source drained--> DRAINING
         |                            |                              |
         |                            +--empty source----------+     |
         |                                                     v     v
         +--chain() freezes config                           EXHAUSTED

Once EXHAUSTED every read returns '' (end-of-stream) forever. A filter is
single-use: it never rewinds and never drains its source twice. An error
stops the filter for good: every later read raises the same error again.

Filters are chained into pipelines either by wrapping one filter in another
(IncludeFilter is an io.TextIOBase) or with chain(), which binds the already
frozen configuration to a new source.
"""

import io
from typing import Any, Iterator, Optional, Sequence, TextIO

from ..models.filter import FilterConfig, FilterState
from ..models.parameters import Parameter
from .errors import IncludeFilterError, IOFailure
from .resolver import IncludeResolver
from .parameters import config_build
from .log import LOG


# Characters requested per read() call while draining the source
DRAIN_CHUNK = 64 * 1024


class IncludeFilter(io.TextIOBase):
    """
    Text stream that yields its source with include directives spliced

    Attributes:
        source: Underlying text stream (anything with read(size) -> str)
        parameters: Host parameters, turned into a config on first read
    """

    def __init__(
        self,
        source: TextIO,
        parameters: Optional[Sequence[Optional[Parameter]]] = None,
        config: Optional[FilterConfig] = None,
        appsettings: Any = None,
    ) -> None:
        """
        Args:
            source: Underlying text stream
            parameters: Host parameters (setting / searchdir / propertiesfile)
            config: Ready configuration; skips parameter initialization
            appsettings: AppSettings supplying reserved-key defaults
                         (defaults to the package singleton)
        """
        super().__init__()
        self.source = source
        self.parameters = list(parameters or [])
        self.appsettings = appsettings
        self._config: Optional[FilterConfig] = config
        self._resolver: Optional[IncludeResolver] = None
        self._buffer = ""
        self._position = 0
        self._state = FilterState.UNCONFIGURED
        self._failure: Optional[IncludeFilterError] = None
        if config is not None:
            self._resolver = IncludeResolver(config)
            self._state = FilterState.INITIALIZED

    @property
    def state(self) -> FilterState:
        return self._state

    @property
    def failure(self) -> Optional[IncludeFilterError]:
        """Error that stopped the filter, or None"""
        return self._failure

    @property
    def config(self) -> Optional[FilterConfig]:
        """Frozen configuration, or None before the first read"""
        return self._config

    def configure(self) -> FilterConfig:
        """
        Freeze the configuration (UNCONFIGURED -> INITIALIZED)

        Idempotent: once frozen, the same configuration is returned.

        Raises:
            ConfigurationError: If a parameter, setting or pattern is invalid
        """
        if self._config is None:
            LOG(f"Configuring include filter from {len(self.parameters)} parameter(s)", level=2)
            self._config = config_build(self.parameters, self.appsettings)
        if self._resolver is None:
            self._resolver = IncludeResolver(self._config)
        if self._state is FilterState.UNCONFIGURED:
            self._state = FilterState.INITIALIZED
        return self._config

    def source_drain(self) -> str:
        """
        Read the underlying source until its end-of-stream

        Raises:
            IOFailure: If the source fails while being read
        """
        chunks = []
        try:
            while True:
                chunk = self.source.read(DRAIN_CHUNK)
                if not chunk:
                    break
                chunks.append(chunk)
        except (OSError, UnicodeError) as e:
            raise IOFailure(f"Cannot read source stream: {e}") from e
        return ''.join(chunks)

    def source_load(self, resolver: IncludeResolver) -> None:
        """
        Drain and expand the source (INITIALIZED -> DRAINING or EXHAUSTED)
        """
        text = self.source_drain()
        LOG(f"Read {len(text)} characters from source", level=2)
        if not text:
            self._state = FilterState.EXHAUSTED
            return

        self._buffer = resolver.expand(text)
        self._position = 0
        if self._buffer:
            self._state = FilterState.DRAINING
        else:
            self._state = FilterState.EXHAUSTED

    def ready_ensure(self) -> bool:
        """
        Advance the state machine until units can be served

        A failure is fatal for the filter: the error is kept and raised again
        on every later request, and the source is never drained twice.

        Returns:
            True while DRAINING, False once EXHAUSTED

        Raises:
            IncludeFilterError: The error that stopped this filter
        """
        if self._failure is not None:
            raise self._failure
        try:
            while True:
                if self._state is FilterState.UNCONFIGURED:
                    self.configure()
                elif self._state is FilterState.INITIALIZED:
                    self.source_load(self._resolver or IncludeResolver(self.configure()))
                else:
                    return self._state is FilterState.DRAINING
        except IncludeFilterError as e:
            self._failure = e
            LOG(f"Include filter failed: {e}", level=2)
            raise

    def units_take(self, size: Optional[int] = -1, line: bool = False) -> str:
        """
        Pop units from the front of the expanded buffer

        Args:
            size: Maximum number of units, negative or None for all
            line: Stop after the first '\\n'

        Returns:
            Popped units, or '' at end-of-stream
        """
        if not self.ready_ensure():
            return ""

        end = len(self._buffer)
        if line:
            newline = self._buffer.find('\n', self._position)
            if newline != -1:
                end = newline + 1
        if size is not None and size >= 0:
            end = min(end, self._position + size)

        chunk = self._buffer[self._position:end]
        self._position = end
        if self._position >= len(self._buffer):
            self._buffer = ""
            self._position = 0
            self._state = FilterState.EXHAUSTED
            LOG("Include filter exhausted", level=3)
        return chunk

    def unit_next(self) -> str:
        """
        Return the next character of the filtered stream

        Returns:
            One character, or '' once the stream is exhausted
        """
        return self.units_take(1)

    def units(self) -> Iterator[str]:
        """Iterate over the remaining characters"""
        while True:
            unit = self.unit_next()
            if not unit:
                return
            yield unit

    def chain(self, source: TextIO) -> "IncludeFilter":
        """
        Create a filter over another source with this filter's configuration

        The configuration is frozen first (defaults applied), and the new
        filter starts INITIALIZED, skipping parameter initialization.

        Args:
            source: Underlying stream for the new filter

        Returns:
            New, independent IncludeFilter
        """
        config = self.configure()
        return type(self)(source, config=config, appsettings=self.appsettings)

    # io.TextIOBase interface

    def readable(self) -> bool:
        return True

    def read(self, size: Optional[int] = -1) -> str:
        self._checkClosed()
        return self.units_take(size)

    def readline(self, size: Optional[int] = -1) -> str:
        self._checkClosed()
        return self.units_take(size, line=True)

    def close(self) -> None:
        """Close the filter and the wrapped source"""
        if not self.closed:
            close = getattr(self.source, "close", None)
            if close is not None:
                close()
        super().close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} state={self._state.value}>"
