"""Tests for run configuration."""

import pytest

from buddhascope.config import (
    PROFILES,
    BuddhabrotConfig,
    ChannelParams,
    default_channels,
    from_profile,
)
from buddhascope.core.errors import ConfigurationError
from buddhascope.core.viewport import Viewport


class TestDefaults:
    def test_reference_defaults(self):
        cfg = BuddhabrotConfig().validate()
        assert (cfg.width, cfg.height) == (200, 200)
        assert cfg.viewport.as_tuple() == (-2.0, -2.0, 2.0, 2.0)
        assert [ch.name for ch in cfg.channels] == ["red", "green", "blue"]
        assert [ch.iterations for ch in cfg.channels] == [200, 200, 800]
        assert all(ch.samples == 200 * 200 * 100 for ch in cfg.channels)
        assert cfg.normalization == "shared"

    def test_channels_follow_dimensions(self):
        cfg = BuddhabrotConfig(width=10, height=4)
        assert cfg.channel("blue").samples == 10 * 4 * 100

    def test_default_channels_samples_per_pixel(self):
        assert default_channels(3, 3, samples_per_pixel=2)[0].samples == 18

    def test_unknown_channel(self):
        with pytest.raises(KeyError):
            BuddhabrotConfig().channel("alpha")

    def test_to_dict(self):
        d = BuddhabrotConfig(width=8, height=6, seed=3).to_dict()
        assert d["width"] == 8
        assert d["viewport"] == {"min_r": -2.0, "min_i": -2.0, "max_r": 2.0, "max_i": 2.0}
        assert d["seed"] == 3
        assert len(d["channels"]) == 3


class TestValidation:
    @pytest.mark.parametrize("overrides", [
        {"width": 0},
        {"height": -5},
        {"normalization": "global"},
        {"output_scale": 0.0},
        {"workers": 0},
        {"batch_size": 0},
    ])
    def test_invalid_fields(self, overrides):
        with pytest.raises(ConfigurationError):
            BuddhabrotConfig(**overrides).validate()

    def test_non_positive_budget(self):
        channels = default_channels(4, 4)
        channels[1].iterations = 0
        with pytest.raises(ConfigurationError, match="green"):
            BuddhabrotConfig(width=4, height=4, channels=channels).validate()

    def test_negative_samples(self):
        channels = default_channels(4, 4)
        channels[2].samples = -1
        with pytest.raises(ConfigurationError):
            BuddhabrotConfig(width=4, height=4, channels=channels).validate()

    def test_zero_samples_allowed(self):
        channels = [ChannelParams(n, 10, 0) for n in ("red", "green", "blue")]
        BuddhabrotConfig(width=4, height=4, channels=channels).validate()

    def test_wrong_channel_count(self):
        with pytest.raises(ConfigurationError):
            BuddhabrotConfig(channels=[ChannelParams("red", 10, 10)]).validate()

    @pytest.mark.parametrize("names", [
        ("red", "red", "blue"),
        ("red", "green", "alpha"),
        ("blue", "green", "red"),
    ])
    def test_channel_names(self, names):
        channels = [ChannelParams(n, 10, 10) for n in names]
        with pytest.raises(ConfigurationError, match="named"):
            BuddhabrotConfig(width=4, height=4, channels=channels).validate()

    def test_viewport_type(self):
        with pytest.raises(ConfigurationError):
            BuddhabrotConfig(viewport=(-2, -2, 2, 2)).validate()  # type: ignore[arg-type]


class TestProfiles:
    @pytest.mark.parametrize("name", sorted(PROFILES))
    def test_profiles_validate(self, name):
        from_profile(name).validate()

    def test_overrides(self):
        vp = Viewport.from_bounds(-1.0, -1.0, 1.0, 1.0)
        cfg = from_profile(
            "preview", width=32, height=16, samples=500,
            iterations=(5, 6, 7), viewport=vp, normalization="per_channel", seed=9,
        )
        assert (cfg.width, cfg.height) == (32, 16)
        assert [ch.iterations for ch in cfg.channels] == [5, 6, 7]
        assert all(ch.samples == 500 for ch in cfg.channels)
        assert cfg.viewport == vp
        assert cfg.normalization == "per_channel"
        assert cfg.seed == 9

    def test_none_overrides_ignored(self):
        cfg = from_profile("preview", width=None, seed=None)
        assert cfg.width == PROFILES["preview"]["width"]
        assert cfg.seed is None

    def test_samples_from_density(self):
        cfg = from_profile("preview", width=10, height=10)
        assert cfg.channels[0].samples == 10 * 10 * PROFILES["preview"]["samples_per_pixel"]

    def test_unknown_override(self):
        with pytest.raises(ConfigurationError, match="zoom"):
            from_profile("preview", zoom=2.0)

    def test_unknown_profile(self):
        with pytest.raises(ConfigurationError):
            from_profile("ultra")
