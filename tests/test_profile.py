import pytest

from cpuprofile_flame.exporters.view_flame import format_time
from cpuprofile_flame.profile import FrameInfo, Profile, RawValueFormatter, TimeFormatter


class TestTimeFormatter:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (0.5, "500.00ns"),
            (500, "500.00µs"),
            (1500, "1.50ms"),
            (2_500_000, "2.50s"),
            (90_000_000, "1:30"),
        ],
    )
    def test_microseconds(self, value, expected):
        assert TimeFormatter("microseconds").format(value) == expected

    @pytest.mark.parametrize(
        "value, expected",
        [(-1500, "-1.50ms"), (-500, "-500.00µs"), (-90_000_000, "-1:30")],
    )
    def test_negative_values_scale_by_magnitude(self, value, expected):
        assert TimeFormatter("microseconds").format(value) == expected

    def test_micro_sign_matches_tree_view(self):
        assert TimeFormatter("microseconds").format(5)[-2:] == format_time(5)[-2:] == "\u00b5s"

    def test_milliseconds(self):
        assert TimeFormatter("milliseconds").format(12) == "12.00ms"

    def test_unknown_unit(self):
        with pytest.raises(ValueError):
            TimeFormatter("fortnights")


class TestRawValueFormatter:
    def test_integral_values_have_no_decimals(self):
        assert RawValueFormatter().format(3) == "3"
        assert RawValueFormatter().format(3.0) == "3"

    def test_fractional_values(self):
        assert RawValueFormatter().format(2.5) == "2.50"


class TestProfile:
    def test_defaults(self):
        profile = Profile()
        assert profile.get_total_weight() == 0
        assert profile.sample_count == 0
        assert profile.frames() == []
        assert profile.format_value(7) == "7"

    def test_append_sample_copies_stack(self):
        a = FrameInfo(key="a", name="a")
        stack = [a]
        profile = Profile(10)
        profile.append_sample(stack, 4)
        stack.append(FrameInfo(key="b", name="b"))

        assert profile.samples == [[a]]
        assert list(profile.iter_samples()) == [([a], 4)]

    def test_frames_are_unique_in_first_appearance_order(self):
        a = FrameInfo(key="a", name="a")
        b = FrameInfo(key="b", name="b")
        c = FrameInfo(key="c", name="c")
        profile = Profile(10)
        profile.append_sample([a, b], 1)
        profile.append_sample([a, c], 2)
        profile.append_sample([a, b], 3)

        assert profile.frames() == [a, b, c]
        assert profile.get_sample_weight() == 6

    def test_frame_identity(self):
        assert FrameInfo(key="a", name="a") != FrameInfo(key="a", name="a")

    def test_value_formatter(self):
        profile = Profile(10)
        profile.set_value_formatter(TimeFormatter("microseconds"))
        assert profile.format_value(1500) == "1.50ms"

    def test_name(self):
        profile = Profile()
        profile.set_name("trace.json")
        assert profile.name == "trace.json"
