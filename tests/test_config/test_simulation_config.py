import pytest
import yaml

from config import (
    ConfigurationError,
    SimulationConfig,
    BuildingConfig,
    TimingConfig,
    load_simulation_config,
    save_simulation_config,
    parse_count
)


def test_defaults():
    config = SimulationConfig()
    assert config.building.num_floors == 10
    assert config.elevator.num_elevators == 3
    assert config.timing.floor_travel_time == 2.0
    assert config.timing.door_open_time == 2.5
    assert config.timing.settle_margin == 5.0
    assert config.scheduler.tick_interval == 0.05


@pytest.mark.parametrize("value", [0, -1, "abc", "", None, True, 1.5, "2.5"])
def test_parse_count_rejects(value):
    with pytest.raises(ConfigurationError):
        parse_count(value, "floor count")


@pytest.mark.parametrize("value, expected", [(4, 4), ("4", 4), (3.0, 3), (" 7 ", 7)])
def test_parse_count_accepts(value, expected):
    assert parse_count(value, "floor count") == expected


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        BuildingConfig(num_floors=0)


def test_negative_timing_rejected():
    with pytest.raises(ConfigurationError):
        TimingConfig(settle_margin=-1.0)
    with pytest.raises(ConfigurationError):
        TimingConfig(floor_travel_time=0)


def test_from_dict_reads_nested_sections():
    config = SimulationConfig.from_dict({
        'simulation': {
            'building': {'num_floors': 20},
            'elevator': {'num_elevators': 4},
            'timing': {'settle_margin': 1.0},
            'scheduler': {'tick_interval': 0.1},
            'traffic': {'scripted_calls': [{'time': 0, 'floor': 3, 'direction': 'UP'}]},
            'random_seed': 7,
        }
    })
    assert config.building.num_floors == 20
    assert config.elevator.num_elevators == 4
    assert config.timing.settle_margin == 1.0
    assert config.timing.door_close_time == 2.5
    assert config.scheduler.tick_interval == 0.1
    assert config.random_seed == 7
    assert config.traffic.scripted_calls[0]['floor'] == 3


def test_validate_rejects_scripted_call_outside_building():
    config = SimulationConfig.from_dict({
        'building': {'num_floors': 5},
        'traffic': {'scripted_calls': [{'time': 0, 'floor': 6, 'direction': 'DOWN'}]},
    })
    with pytest.raises(ConfigurationError):
        config.validate()


def test_scripted_call_missing_field_rejected():
    with pytest.raises(ConfigurationError):
        SimulationConfig.from_dict({'traffic': {'scripted_calls': [{'floor': 2}]}})


def test_yaml_save_and_load(tmp_path):
    config = SimulationConfig.from_dict({
        'building': {'num_floors': 8},
        'elevator': {'num_elevators': 2},
        'random_seed': 3,
    })
    path = tmp_path / "scenario.yaml"
    save_simulation_config(config, path)

    loaded = load_simulation_config(path)
    assert loaded.to_dict() == config.to_dict()
    assert yaml.safe_load(path.read_text())['simulation']['building']['num_floors'] == 8


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_simulation_config(tmp_path / "missing.yaml")


def test_load_invalid_counts(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("simulation:\n  building:\n    num_floors: 0\n")
    with pytest.raises(ConfigurationError):
        load_simulation_config(path)


def test_load_non_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(ConfigurationError):
        load_simulation_config(path)


@pytest.mark.parametrize("floor, direction", [(5, "UP"), (1, "DOWN")])
def test_validate_rejects_missing_hall_button(floor, direction):
    config = SimulationConfig.from_dict({
        'building': {'num_floors': 5},
        'traffic': {'scripted_calls': [{'time': 1, 'floor': floor, 'direction': direction}]},
    })
    with pytest.raises(ConfigurationError):
        config.validate()


@pytest.mark.parametrize("entry", [
    {'time': 0, 'floor': 'five', 'direction': 'UP'},
    {'time': 'soon', 'floor': 3, 'direction': 'UP'},
    {'time': 0, 'floor': 2.5, 'direction': 'UP'},
])
def test_scripted_call_non_numeric_fields_rejected(entry):
    with pytest.raises(ConfigurationError):
        SimulationConfig.from_dict({'traffic': {'scripted_calls': [entry]}})


def test_scripted_call_numeric_strings_coerced():
    config = SimulationConfig.from_dict({
        'traffic': {'scripted_calls': [{'time': '1.5', 'floor': '3', 'direction': 'UP'}]},
    })
    config.validate()
    assert config.traffic.scripted_calls == [{'time': 1.5, 'floor': 3, 'direction': 'UP'}]


def test_quoted_timing_values_coerced():
    config = SimulationConfig.from_dict({
        'timing': {'floor_travel_time': '2.0', 'settle_margin': '0'},
        'scheduler': {'tick_interval': '0.1'},
        'realtime_factor': '1',
    })
    assert config.timing.floor_travel_time == 2.0
    assert config.timing.settle_margin == 0.0
    assert config.scheduler.tick_interval == 0.1
    assert config.realtime_factor == 1.0


@pytest.mark.parametrize("section, key", [
    ('timing', 'door_open_time'),
    ('scheduler', 'tick_interval'),
    ('traffic', 'simulation_duration'),
    ('traffic', 'call_generation_rate'),
])
def test_non_numeric_values_raise_configuration_error(section, key):
    with pytest.raises(ConfigurationError):
        SimulationConfig.from_dict({section: {key: 'fast'}})


def test_non_numeric_realtime_factor_rejected():
    with pytest.raises(ConfigurationError):
        SimulationConfig.from_dict({'realtime_factor': 'fast'})
