"""Tests for proxy URL parsing and resolution."""

from __future__ import annotations

import pytest

from scanlink.connect.proxy import ProxyResolver, parse_proxy_url
from scanlink.exceptions import ProxyConfigError
from scanlink.models import HttpConfig, ProxyConfig, ProxyConfigured, ProxyDisabled, ProxySupport


def _resolver(**kwargs: object) -> ProxyResolver:
    http = HttpConfig(**kwargs)  # type: ignore[arg-type]
    return ProxyResolver(lambda: http)


class TestParseProxyUrl:
    def test_full_url(self) -> None:
        config = parse_proxy_url("http://proxy.local:3128")
        assert config == ProxyConfig(protocol="http", host="proxy.local", port=3128)
        assert config.url == "http://proxy.local:3128"

    def test_port_omitted(self) -> None:
        config = parse_proxy_url("https://proxy.local")
        assert config.port is None
        assert config.url == "https://proxy.local"

    def test_scheme_lowercased(self) -> None:
        assert parse_proxy_url("HTTP://proxy.local:1").protocol == "http"

    def test_credentials_not_part_of_host(self) -> None:
        config = parse_proxy_url("http://user:pw@proxy.local:3128")
        assert config.host == "proxy.local"

    @pytest.mark.parametrize("url", ["proxy.local:3128", "not a proxy", "http://", ""])
    def test_malformed_raises(self, url: str) -> None:
        with pytest.raises(ProxyConfigError):
            parse_proxy_url(url)

    def test_bad_port_raises(self) -> None:
        with pytest.raises(ProxyConfigError):
            parse_proxy_url("http://proxy.local:99999")


class TestProxyResolver:
    def test_off_disables_even_with_url(self) -> None:
        resolver = _resolver(proxy_support=ProxySupport.OFF, proxy="http://proxy.local:3128")
        assert resolver.resolve() == ProxyDisabled()

    def test_off_ignores_malformed_url(self) -> None:
        resolver = _resolver(proxy_support=ProxySupport.OFF, proxy="garbage")
        assert isinstance(resolver.resolve(), ProxyDisabled)

    @pytest.mark.parametrize("support", [ProxySupport.DEFAULT, ProxySupport.OVERRIDE])
    def test_no_url_gives_empty_config(self, support: ProxySupport) -> None:
        setting = _resolver(proxy_support=support).resolve()
        assert setting == ProxyConfigured()
        assert setting.config.url is None

    def test_url_parsed(self) -> None:
        setting = _resolver(proxy="http://proxy.local:3128").resolve()
        assert isinstance(setting, ProxyConfigured)
        assert setting.config == ProxyConfig(protocol="http", host="proxy.local", port=3128)

    def test_reads_settings_each_time(self) -> None:
        http = HttpConfig()
        resolver = ProxyResolver(lambda: http)
        assert resolver.resolve() == ProxyConfigured()
        http.proxy_support = ProxySupport.OFF
        assert resolver.resolve() == ProxyDisabled()

    def test_proxy_authorization(self) -> None:
        assert _resolver(proxy_authorization="Basic abc").proxy_authorization() == "Basic abc"
        assert _resolver().proxy_authorization() is None
        assert _resolver(proxy_authorization="").proxy_authorization() is None
