import sys
import random
from pathlib import Path

# Put the repo root on sys.path so `import core` works when run as tools/create_test_library.py.
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core.args import make_placeholder
from core.settings import Settings
from core.tree import ROOT_ID, SNIPPET, SEPARATOR, FOLDER, TAB, ItemStore
from core.tree_utils import add_item
from utils.fs_atomic import atomic_write_json
from utils.icon_tokens import make_icon_token
from utils.paths import normalize_config_path

COMMANDS = [
    ("List files", "ls -la", "Long listing of the current directory"),
    ("Disk usage", "du -sh *", "Size of each entry here"),
    ("Git status", "git status", None),
    ("Git log", "git log --oneline -20", "Last twenty commits"),
    ("Free memory", "free -h", None),
    ("Processes", "ps aux --sort=-%cpu | head", "Busiest processes"),
    ("Uptime", "uptime", None),
    ("Python version", "python3 --version", None),
    ("Docker ps", "docker ps", "Running containers"),
    ("Open ports", "ss -tlnp", None),
]

SMART_COMMANDS = [
    ("Tag release", "git tag -a {} -m \"{}\"", ["Version", "Comment"]),
    ("Grep here", "grep -rn \"{}\" {}", ["Pattern", "Path"]),
    ("Checkout branch", "git checkout {}", ["Branch"]),
    ("Make target", "make {}", ["Target"]),
    ("SSH to host", "ssh {}@{}", ["User", "Host"]),
]

ICONS = ["terminal", "rocket", "git-branch", "gear", "star", "package", "bug", "zap"]

WORDS = ["Build", "Deploy", "Git", "Docker", "Logs", "Network", "Scratch", "Infra", "Data", "Misc"]

def random_name(base: str) -> str:
    if random.random() < 0.3:
        return f"{make_icon_token(random.choice(ICONS))} {base}"
    return base

def smart_command():
    name, template, labels = random.choice(SMART_COMMANDS)
    tokens = [make_placeholder(i + 1, label) for i, label in enumerate(labels)]
    return name, template.format(*tokens)

def build_library(count: int, seed=None) -> ItemStore:
    """A store with `count` random items: tabs, nested folders, snippets, smart snippets and separators."""
    rng_state = random.getstate()
    if seed is not None:
        random.seed(seed)
    try:
        store = ItemStore()
        containers = [ROOT_ID]
        for _ in range(count):
            roll = random.random()
            context = random.choice(containers)
            if roll < 0.08:
                tab = add_item(store, TAB, random_name(random.choice(WORDS)))
                containers.append(tab.id)
            elif roll < 0.25:
                folder = add_item(store, FOLDER, random_name(random.choice(WORDS)), context)
                folder.expanded = random.random() < 0.5
                containers.append(folder.id)
            elif roll < 0.32:
                add_item(store, SEPARATOR, "", context)
            elif roll < 0.50:
                name, command = smart_command()
                add_item(store, SNIPPET, random_name(name), context, command=command)
            else:
                name, command, description = random.choice(COMMANDS)
                add_item(store, SNIPPET, random_name(name), context,
                         command=command, description=description)
        return store
    finally:
        if seed is not None:
            random.setstate(rng_state)

def main():
    if len(sys.argv) != 3:
        print(f"Usage: {sys.argv[0]} /path/to/library.json N")
        sys.exit(1)

    path = normalize_config_path(sys.argv[1])
    count = int(sys.argv[2])

    store = build_library(count)
    atomic_write_json(path, {"items": store.to_dicts(), "settings": Settings().to_dict()})
    kinds = {}
    for item in store:
        kinds[item.kind] = kinds.get(item.kind, 0) + 1
    print(f"Wrote {len(store)} items to {path}: {kinds}")
    print(f"Open it with: snippad --config {path}")

if __name__ == '__main__':
    main()
