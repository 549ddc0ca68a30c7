"""Tests for credential providers and provider chains."""

from unittest.mock import Mock, patch

import pytest
from botocore.credentials import (
    Credentials,
    DeferredRefreshableCredentials,
    InstanceMetadataProvider,
)
from botocore.exceptions import NoCredentialsError

from aws_s3_service.credentials import (
    CredentialsProviderChain,
    DeferredCredentialResolver,
    EnvironmentVariableCredentialsProvider,
    StaticCredentialsProvider,
    SystemPropertiesCredentialsProvider,
    default_provider_chain,
    static_provider_chain,
    system_properties,
)


class TestStaticCredentialsProvider:
    """Test the explicit key pair provider."""

    def test_load(self):
        """Test static credentials are returned as configured."""
        credentials = StaticCredentialsProvider("key123", "secret456").load()
        assert credentials.access_key == "key123"
        assert credentials.secret_key == "secret456"
        assert credentials.token is None
        assert credentials.method == "explicit"


class TestEnvironmentVariableCredentialsProvider:
    """Test environment variable credentials."""

    def test_load_from_environment(self, env_credentials):
        """Test credentials are read from os.environ by default."""
        credentials = EnvironmentVariableCredentialsProvider().load()
        assert credentials.access_key == "env_key"
        assert credentials.secret_key == "env_secret"
        assert credentials.method == "env"

    def test_legacy_variable_names(self):
        """Test AWS_ACCESS_KEY and AWS_SECRET_KEY are accepted."""
        provider = EnvironmentVariableCredentialsProvider(
            {"AWS_ACCESS_KEY": "legacy_key", "AWS_SECRET_KEY": "legacy_secret"}
        )
        credentials = provider.load()
        assert credentials.access_key == "legacy_key"
        assert credentials.secret_key == "legacy_secret"

    def test_session_token(self):
        """Test the session token is picked up when present."""
        provider = EnvironmentVariableCredentialsProvider(
            {
                "AWS_ACCESS_KEY_ID": "key",
                "AWS_SECRET_ACCESS_KEY": "secret",
                "AWS_SESSION_TOKEN": "token789",
            }
        )
        assert provider.load().token == "token789"

    def test_missing(self):
        """Test nothing is returned without variables."""
        assert EnvironmentVariableCredentialsProvider({}).load() is None

    def test_partial(self):
        """Test half a key pair is treated as missing."""
        provider = EnvironmentVariableCredentialsProvider({"AWS_ACCESS_KEY_ID": "key"})
        assert provider.load() is None

    def test_blank_values(self):
        """Test blank variables are treated as missing."""
        provider = EnvironmentVariableCredentialsProvider(
            {"AWS_ACCESS_KEY_ID": " ", "AWS_SECRET_ACCESS_KEY": "secret"}
        )
        assert provider.load() is None


class TestSystemPropertiesCredentialsProvider:
    """Test system property credentials."""

    def test_load_from_system_properties(self):
        """Test credentials are read from the process-wide properties."""
        system_properties["aws.accessKeyId"] = "prop_key"
        system_properties["aws.secretKey"] = "prop_secret"

        credentials = SystemPropertiesCredentialsProvider().load()
        assert credentials.access_key == "prop_key"
        assert credentials.secret_key == "prop_secret"
        assert credentials.method == "system-properties"

    def test_explicit_properties(self):
        """Test a properties mapping can be supplied directly."""
        provider = SystemPropertiesCredentialsProvider(
            {
                "aws.accessKeyId": "key",
                "aws.secretKey": "secret",
                "aws.sessionToken": "token",
            }
        )
        assert provider.load().token == "token"

    def test_missing(self):
        """Test nothing is returned without properties."""
        assert SystemPropertiesCredentialsProvider().load() is None


class TestCredentialsProviderChain:
    """Test ordered credential resolution."""

    def test_first_result_wins(self):
        """Test later providers are not consulted once one succeeds."""
        empty = Mock(CANONICAL_NAME="Empty")
        empty.load.return_value = None
        found = Mock(CANONICAL_NAME="Found")
        found.load.return_value = Credentials("key", "secret")
        never = Mock(CANONICAL_NAME="Never")

        chain = CredentialsProviderChain([empty, found, never])
        credentials = chain.load_credentials()

        assert credentials.access_key == "key"
        empty.load.assert_called_once()
        found.load.assert_called_once()
        never.load.assert_not_called()

    def test_nothing_found(self):
        """Test the chain returns None when every provider is empty."""
        empty = Mock(CANONICAL_NAME="Empty")
        empty.load.return_value = None
        assert CredentialsProviderChain([empty]).load_credentials() is None


class TestDefaultProviderChain:
    """Test the fallback chain used without a key pair."""

    def test_order(self):
        """Test environment, system properties, then instance profile."""
        chain = default_provider_chain()
        assert [type(p) for p in chain.providers] == [
            EnvironmentVariableCredentialsProvider,
            SystemPropertiesCredentialsProvider,
            InstanceMetadataProvider,
        ]

    def test_environment_first(self, env_credentials):
        """Test environment credentials win over system properties."""
        system_properties["aws.accessKeyId"] = "prop_key"
        system_properties["aws.secretKey"] = "prop_secret"

        with patch.object(InstanceMetadataProvider, "load") as mock_load:
            credentials = default_provider_chain().load_credentials()

        assert credentials.access_key == "env_key"
        mock_load.assert_not_called()

    def test_system_properties_before_instance_profile(self):
        """Test system properties are consulted before the metadata service."""
        system_properties["aws.accessKeyId"] = "prop_key"
        system_properties["aws.secretKey"] = "prop_secret"

        with patch.object(InstanceMetadataProvider, "load") as mock_load:
            credentials = default_provider_chain().load_credentials()

        assert credentials.access_key == "prop_key"
        mock_load.assert_not_called()

    def test_instance_profile_last(self):
        """Test the instance profile is used when nothing else is set."""
        with patch.object(InstanceMetadataProvider, "load") as mock_load:
            mock_load.return_value = Credentials("role_key", "role_secret")
            credentials = default_provider_chain().load_credentials()

        assert credentials.access_key == "role_key"
        mock_load.assert_called_once()

    def test_building_chain_does_not_load(self):
        """Test building the chain performs no credential lookups."""
        with patch.object(InstanceMetadataProvider, "load") as mock_load:
            default_provider_chain()
        mock_load.assert_not_called()


class TestStaticProviderChain:
    """Test the chain built from a configured key pair."""

    def test_single_static_provider(self):
        """Test only the static provider is in the chain."""
        chain = static_provider_chain("key123", "secret456")
        assert len(chain.providers) == 1
        assert isinstance(chain.providers[0], StaticCredentialsProvider)
        assert chain.provider_names == ["Static"]

    def test_ignores_environment(self, env_credentials):
        """Test environment credentials do not override the key pair."""
        credentials = static_provider_chain("key123", "secret456").load_credentials()
        assert credentials.access_key == "key123"


class TestDeferredCredentials:
    """Test credentials resolved on first use rather than on creation."""

    def test_resolver_does_not_walk_chain(self):
        """Test handing credentials to botocore performs no lookups."""
        provider = Mock(CANONICAL_NAME="Tracked")
        chain = CredentialsProviderChain([provider])

        credentials = DeferredCredentialResolver(chain).load_credentials()

        assert isinstance(credentials, DeferredRefreshableCredentials)
        provider.load.assert_not_called()

    def test_resolved_on_first_use(self):
        """Test the chain is walked when frozen credentials are requested."""
        chain = static_provider_chain("key123", "secret456")
        credentials = chain.deferred_credentials()

        frozen = credentials.get_frozen_credentials()
        assert frozen.access_key == "key123"
        assert frozen.secret_key == "secret456"
        assert frozen.token is None

    def test_resolved_once_until_refresh(self):
        """Test found credentials are reused until the refresh interval."""
        provider = Mock(CANONICAL_NAME="Tracked")
        provider.load.return_value = Credentials("key", "secret")
        credentials = CredentialsProviderChain([provider]).deferred_credentials()

        credentials.get_frozen_credentials()
        credentials.get_frozen_credentials()

        provider.load.assert_called_once()

    def test_missing_credentials_retried(self, monkeypatch):
        """Test credentials that appear after a failed lookup are picked up."""
        with patch.object(InstanceMetadataProvider, "load", return_value=None):
            credentials = default_provider_chain().deferred_credentials()

            with pytest.raises(NoCredentialsError):
                credentials.get_frozen_credentials()

            monkeypatch.setenv("AWS_ACCESS_KEY_ID", "late_key")
            monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "late_secret")
            frozen = credentials.get_frozen_credentials()

        assert frozen.access_key == "late_key"
        assert frozen.secret_key == "late_secret"

    def test_fetch_metadata_without_credentials(self):
        """Test an empty chain reports missing credentials."""
        empty = Mock(CANONICAL_NAME="Empty")
        empty.load.return_value = None
        with pytest.raises(NoCredentialsError):
            CredentialsProviderChain([empty]).fetch_metadata()
