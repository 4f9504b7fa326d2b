from bridge.common.core.trace import TraceId


class TestTraceId:
    def test_parse_runtime_api_header(self):
        """Full Lambda-Runtime-Trace-Id header round-trips."""
        header = "Root=1-5759e988-bd862e3fe1be46a994272793;Parent=53995c3f42cd8ad8;Sampled=1"
        trace = TraceId.parse(header)

        assert trace.root == "1-5759e988-bd862e3fe1be46a994272793"
        assert trace.parent == "53995c3f42cd8ad8"
        assert trace.sampled == "1"
        assert trace.is_sampled
        assert str(trace) == header

    def test_parse_partial_header(self):
        """Root only: missing parts stay missing."""
        header = "Root=1-5759e988-bd862e3fe1be46a994272793"
        trace = TraceId.parse(header)
        assert trace.parent is None
        assert trace.sampled is None
        assert not trace.is_sampled
        assert str(trace) == header

    def test_unknown_keys_are_kept(self):
        header = "Root=1-abc-123;Parent=p1;Sampled=0;Lineage=a87bd80c:1|68fd508a:5"
        trace = TraceId.parse(header)

        assert trace.extra == {"Lineage": "a87bd80c:1|68fd508a:5"}
        assert str(trace) == header

    def test_parse_tolerates_spaces(self):
        trace = TraceId.parse("Root=1-abc-123; Parent=p1; Sampled=0")
        assert str(trace) == "Root=1-abc-123;Parent=p1;Sampled=0"

    def test_parse_bare_root(self):
        """A bare id without key/value pairs is used as the root."""
        trace = TraceId.parse("1-5759e988-bd862e3fe1be46a994272793")
        assert str(trace) == "Root=1-5759e988-bd862e3fe1be46a994272793"
