"""
Include filter stream tests

Tests the UNCONFIGURED -> INITIALIZED -> DRAINING -> EXHAUSTED state
machine, unit-by-unit reading, the file-like surface and chain().
"""

import io
import tempfile
from pathlib import Path

import pytest

from includefilter.lib.expander import IncludeFilter
from includefilter.lib.errors import ConfigurationError, IncludeNotFoundError, IOFailure
from includefilter.models.filter import FilterConfig, FilterState
from includefilter.models.parameters import Parameter, ParameterKind


@pytest.fixture
def incdir():
    """Temporary include directory holding inc.txt"""
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "inc.txt").write_text("1\n2\n")
        yield Path(tmpdir)


def params_make(incdir, **settings):
    """Parameters for one search dir plus settings"""
    parameters = [Parameter(ParameterKind.SEARCHDIR, value=str(incdir))]
    for key, value in settings.items():
        parameters.append(Parameter(ParameterKind.SETTING, value=value, name=key))
    return parameters


class FailingSource:
    """Source stream whose read always fails"""

    def read(self, size=-1):
        raise OSError("disk on fire")


class TestStateMachine:
    """Test lifecycle transitions"""

    def test_starts_unconfigured(self, incdir):
        """Nothing happens before the first read"""
        include_filter = IncludeFilter(io.StringIO("x"), params_make(incdir))
        assert include_filter.state is FilterState.UNCONFIGURED
        assert include_filter.config is None

    def test_first_unit_drains(self, incdir):
        """First read configures, drains and starts serving"""
        include_filter = IncludeFilter(io.StringIO('a\n##include "inc.txt"\n'), params_make(incdir))
        assert include_filter.unit_next() == "a"
        assert include_filter.state is FilterState.DRAINING
        assert include_filter.config.search_dirs == (str(incdir),)

    def test_exhausted_after_last_unit(self, incdir):
        """Last unit moves the filter to EXHAUSTED"""
        include_filter = IncludeFilter(io.StringIO("ab"), params_make(incdir))
        assert include_filter.unit_next() == "a"
        assert include_filter.unit_next() == "b"
        assert include_filter.state is FilterState.EXHAUSTED

    def test_exhausted_is_permanent(self, incdir):
        """End-of-stream is reported on every later call"""
        include_filter = IncludeFilter(io.StringIO("a"), params_make(incdir))
        include_filter.unit_next()
        assert [include_filter.unit_next() for _ in range(3)] == ["", "", ""]

    def test_empty_source(self, incdir):
        """Empty source goes straight to EXHAUSTED"""
        include_filter = IncludeFilter(io.StringIO(""), params_make(incdir))
        assert include_filter.unit_next() == ""
        assert include_filter.state is FilterState.EXHAUSTED

    def test_source_expanding_to_nothing(self, incdir):
        """Source that is only an empty include ends immediately"""
        (incdir / "empty.txt").write_text("")
        include_filter = IncludeFilter(io.StringIO('##include "empty.txt"'), params_make(incdir))
        assert include_filter.unit_next() == ""
        assert include_filter.state is FilterState.EXHAUSTED

    def test_source_drained_once(self, incdir):
        """The source is read to its end only once"""
        source = io.StringIO("abc")
        include_filter = IncludeFilter(source, params_make(incdir))
        include_filter.read()
        source.write("more")
        assert include_filter.read() == ""


class TestUnits:
    """Test unit-by-unit output"""

    def test_concrete_scenario(self, incdir):
        """Units spell out the expanded text"""
        include_filter = IncludeFilter(io.StringIO('a\n##include "inc.txt"\nb\n'), params_make(incdir))
        assert "".join(include_filter.units()) == "a\n1\n2\nb\n"

    def test_prefix_scenario(self, incdir):
        """Prefix setting reaches the spliced lines"""
        include_filter = IncludeFilter(
            io.StringIO('a\n##include "inc.txt"\nb\n'), params_make(incdir, prefix="  ")
        )
        assert "".join(include_filter.units()) == "a\n  1\n  2\nb\n"

    def test_units_are_single_characters(self, incdir):
        """Every unit is exactly one character"""
        include_filter = IncludeFilter(io.StringIO('##include "inc.txt"'), params_make(incdir))
        units = list(include_filter.units())
        assert units == ["1", "\n", "2"]

    def test_large_source(self, incdir):
        """Sources larger than one drain chunk are read completely"""
        text = "x" * 200_000 + '\n##include "inc.txt"\n'
        include_filter = IncludeFilter(io.StringIO(text), params_make(incdir))
        assert include_filter.read() == "x" * 200_000 + "\n1\n2\n"


class TestFileInterface:
    """Test read/readline/iteration"""

    def test_read_all(self, incdir):
        """read() returns the whole expanded text"""
        include_filter = IncludeFilter(io.StringIO('##include "inc.txt"\nz'), params_make(incdir))
        assert include_filter.read() == "1\n2\nz"
        assert include_filter.read() == ""

    def test_read_sized(self, incdir):
        """read(n) returns at most n units"""
        include_filter = IncludeFilter(io.StringIO('##include "inc.txt"\nz'), params_make(incdir))
        assert include_filter.read(3) == "1\n2"
        assert include_filter.read(10) == "\nz"
        assert include_filter.read(1) == ""

    def test_readline_and_iteration(self, incdir):
        """Iterating the filter yields lines"""
        include_filter = IncludeFilter(io.StringIO('top\n##include "inc.txt"\nend'), params_make(incdir))
        assert include_filter.readline() == "top\n"
        assert list(include_filter) == ["1\n", "2\n", "end"]

    def test_wrap_as_source(self, incdir):
        """A filter can be the source of another filter"""
        (incdir / "outer.txt").write_text('##include "inc.txt"\n')
        inner = IncludeFilter(io.StringIO('##include "outer.txt"\n'), params_make(incdir))
        outer = IncludeFilter(inner, params_make(incdir, prefix="> "))
        assert outer.read() == "> 1\n> 2\n"

    def test_context_manager_closes_source(self, incdir):
        """Closing the filter closes the wrapped source"""
        source = io.StringIO("abc")
        with IncludeFilter(source, params_make(incdir)) as include_filter:
            assert include_filter.read() == "abc"
        assert source.closed
        with pytest.raises(ValueError):
            include_filter.read()


class TestErrors:
    """Test error propagation"""

    def test_missing_include(self, incdir):
        """Missing include surfaces on the first read"""
        include_filter = IncludeFilter(io.StringIO('##include "nope.txt"\n'), params_make(incdir))
        with pytest.raises(IncludeNotFoundError):
            include_filter.unit_next()

    def test_invalid_setting_on_first_read(self, incdir):
        """Configuration errors surface when the configuration is frozen"""
        include_filter = IncludeFilter(io.StringIO("x"), params_make(incdir, group="zero"))
        with pytest.raises(ConfigurationError):
            include_filter.unit_next()
        assert include_filter.state is FilterState.UNCONFIGURED

    def test_empty_searchdir_parameter(self):
        """Empty search dir parameter is rejected"""
        include_filter = IncludeFilter(io.StringIO("x"), [Parameter(ParameterKind.SEARCHDIR, value="")])
        with pytest.raises(ConfigurationError, match="Search dir"):
            include_filter.read()

    def test_source_failure(self, incdir):
        """Source read errors become IOFailure"""
        include_filter = IncludeFilter(FailingSource(), params_make(incdir))
        with pytest.raises(IOFailure, match="disk on fire"):
            include_filter.unit_next()

    def test_missing_include_raised_again(self):
        """A failed expansion never turns into a clean end-of-stream"""
        include_filter = IncludeFilter(
            io.StringIO('a\n##include "missing.txt"\nb\n'),
            config=FilterConfig(search_dirs=("/nonexistent",)),
        )
        with pytest.raises(IncludeNotFoundError) as first:
            include_filter.read()
        with pytest.raises(IncludeNotFoundError) as second:
            include_filter.read()
        assert second.value is first.value
        assert include_filter.failure is first.value
        assert include_filter.state is FilterState.INITIALIZED

    def test_failure_does_not_drain_again(self, incdir):
        """The source is not read again after a failed expansion"""
        source = io.StringIO('##include "missing.txt"\n')
        include_filter = IncludeFilter(source, params_make(incdir))
        with pytest.raises(IncludeNotFoundError):
            include_filter.unit_next()
        source.write("late text\n")
        with pytest.raises(IncludeNotFoundError):
            include_filter.unit_next()
        with pytest.raises(IncludeNotFoundError):
            list(include_filter.units())

    def test_configuration_error_raised_again(self, incdir):
        """Configuration errors are raised on every read"""
        include_filter = IncludeFilter(io.StringIO("x"), params_make(incdir, group="zero"))
        for _ in range(2):
            with pytest.raises(ConfigurationError):
                include_filter.read()
        assert isinstance(include_filter.failure, ConfigurationError)

    def test_source_failure_raised_again(self, incdir):
        """Source read errors are kept, not retried"""
        include_filter = IncludeFilter(FailingSource(), params_make(incdir))
        with pytest.raises(IOFailure):
            include_filter.read()
        with pytest.raises(IOFailure, match="disk on fire"):
            include_filter.read()


class TestChain:
    """Test chain() configuration reuse"""

    def test_chain_reuses_configuration(self, incdir):
        """Chained filter resolves exactly like the original"""
        original = IncludeFilter(io.StringIO('##include "inc.txt"\n'), params_make(incdir, prefix="> "))
        chained = original.chain(io.StringIO('##include "inc.txt"\n'))
        assert chained.state is FilterState.INITIALIZED
        assert chained.config == original.config
        assert chained.read() == original.read() == "> 1\n> 2\n"

    def test_chain_from_unconfigured_applies_defaults(self, incdir):
        """Chaining freezes defaults on the source filter first"""
        original = IncludeFilter(io.StringIO(""), params_make(incdir))
        chained = original.chain(io.StringIO('x ##include "inc.txt"\n'))
        assert original.state is FilterState.INITIALIZED
        assert chained.config.settings.pattern == '^##include "(.*)"$'
        assert chained.read() == 'x ##include "inc.txt"\n'

    def test_chain_skips_parameters(self, incdir):
        """Chained filter does not re-run parameter initialization"""
        original = IncludeFilter(io.StringIO(""), params_make(incdir))
        chained = original.chain(io.StringIO('##include "inc.txt"'))
        chained.parameters.append(Parameter(ParameterKind.SETTING, value="!", name="prefix"))
        assert chained.read() == "1\n2"

    def test_chain_independent_state(self, incdir):
        """Draining one filter does not affect the other"""
        original = IncludeFilter(io.StringIO("abc"), params_make(incdir))
        chained = original.chain(io.StringIO("xyz"))
        assert original.read() == "abc"
        assert chained.state is FilterState.INITIALIZED
        assert chained.read() == "xyz"

    def test_chain_with_ready_config(self, incdir):
        """Filters built from a config start INITIALIZED"""
        original = IncludeFilter(io.StringIO(""), params_make(incdir))
        config = original.configure()
        include_filter = IncludeFilter(io.StringIO("q"), config=config)
        assert include_filter.state is FilterState.INITIALIZED
        assert include_filter.read() == "q"
