import pytest

from radioss_workload.config import DEFAULT_COMMAND_LINE, WorkloadConfig
from radioss_workload.errors import ConfigError, ErrorReason


class TestWorkloadConfigFromParameters:
    def test_profile_parameters(self) -> None:
        config = WorkloadConfig.from_parameters(
            {
                "Scenario": "Running_OpenRadioss",
                "MetricScenario": "np_1_and_nt_2",
                "PackageName": "openradioss",
                "VisualcppPackageName": "visual_c++_red",
                "CommandLine": "NEON1M11_0000.rad 2 1 no no no no no",
                "ThreadCount": "8",
                "Tags": "crash, cpu,",
            }
        )

        assert config.package_name == "openradioss"
        assert config.visualcpp_package_name == "visual_c++_red"
        assert config.thread_count == 8
        assert config.tags == ("crash", "cpu")
        assert config.effective_metric_scenario == "np_1_and_nt_2"

    def test_defaults(self) -> None:
        config = WorkloadConfig.from_parameters({"PackageName": "openradioss"})

        assert config.command_line == DEFAULT_COMMAND_LINE
        assert config.thread_count is None
        assert config.process_name == "OpenRadioss"
        assert config.results_file_name == "NEON1M11_0001.out"
        assert config.effective_metric_scenario == "OpenRadioss"

    def test_package_name_is_required(self) -> None:
        with pytest.raises(ConfigError, match="PackageName") as exc_info:
            WorkloadConfig.from_parameters({"ThreadCount": 2})
        assert exc_info.value.reason is ErrorReason.INVALID_CONFIGURATION

    @pytest.mark.parametrize("value", ["two", "1.5", True])
    def test_thread_count_must_be_integer(self, value: object) -> None:
        with pytest.raises(ConfigError, match="ThreadCount"):
            WorkloadConfig.from_parameters({"PackageName": "openradioss", "ThreadCount": value})


class TestWorkloadConfigValidation:
    def test_rejects_non_positive_thread_count(self) -> None:
        with pytest.raises(ConfigError, match="thread_count"):
            WorkloadConfig(package_name="openradioss", thread_count=0)

    def test_rejects_blank_required_fields(self) -> None:
        with pytest.raises(ConfigError, match="process_name"):
            WorkloadConfig(package_name="openradioss", process_name=" ")

    def test_config_is_frozen(self, workload_config: WorkloadConfig) -> None:
        with pytest.raises(AttributeError):
            workload_config.thread_count = 1  # type: ignore[misc]


class TestWorkloadConfigFromEnv:
    def test_defaults_without_env(self, clean_env: None) -> None:
        config = WorkloadConfig.from_env()
        assert config.package_name == "openradioss"
        assert config.thread_count is None

    def test_reads_env(self, clean_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RADIOSS_PACKAGE_NAME", "openradioss-2024")
        monkeypatch.setenv("RADIOSS_THREAD_COUNT", "16")
        monkeypatch.setenv("RADIOSS_TAGS", "nightly")

        config = WorkloadConfig.from_env()

        assert config.package_name == "openradioss-2024"
        assert config.thread_count == 16
        assert config.tags == ("nightly",)
