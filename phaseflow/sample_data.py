"""Bundled demo dataset: seven projects, three links, three standalone phases."""

from phaseflow.models import FlowDataset

PROJECTS = [
    {"id": "project1", "name": "Project A", "time": "2022-01-01", "size": 50, "color": "#3498db"},
    {"id": "project2", "name": "Project B", "time": "2022-04-01", "size": 80, "color": "#e74c3c"},
    {"id": "project3", "name": "Project C", "time": "2022-08-01", "size": 60, "color": "#2ecc71"},
    {"id": "project4", "name": "Project D", "time": "2022-10-01", "size": 100, "color": "#9b59b6"},
    {"id": "project5", "name": "Project E", "time": "2022-03-15", "size": 35, "color": "#f39c12"},
    {"id": "project6", "name": "Project F", "time": "2022-07-10", "size": 75, "color": "#1abc9c"},
    {"id": "project7", "name": "Project G", "time": "2022-12-05", "size": 45, "color": "#34495e"},
]

LINKS = [
    {"source": "project1", "target": "project3", "strength": 20, "duration": 7, "phases": 4},
    {"source": "project2", "target": "project4", "strength": 45, "duration": 6, "phases": 3},
    {"source": "project3", "target": "project4", "strength": 35, "duration": 2, "phases": 1},
]

STANDALONE = [
    {"source": "project5", "duration": 4, "phases": 2},
    {"source": "project6", "duration": 5, "phases": 3},
    {"source": "project7", "duration": 3, "phases": 1},
]


def sample_dataset() -> FlowDataset:
    return FlowDataset.from_records(PROJECTS, LINKS, STANDALONE)
