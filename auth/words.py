"""Word lists for human-pronounceable login codes."""

import secrets

ADJECTIVES = [
    "amber", "ancient", "bold", "brave", "breezy", "bright", "calm", "clever",
    "cosmic", "crisp", "curly", "dapper", "daring", "dusty", "eager", "early",
    "fancy", "fierce", "fluffy", "frosty", "gentle", "giant", "golden", "grumpy",
    "happy", "hidden", "humble", "icy", "jolly", "keen", "lazy", "lively",
    "lucky", "mellow", "mighty", "misty", "noble", "odd", "plucky", "polite",
    "proud", "quick", "quiet", "rapid", "rusty", "salty", "shiny", "silent",
    "silly", "sleepy", "smooth", "sneaky", "snowy", "sunny", "swift", "tidy",
    "tiny", "velvet", "wandering", "witty", "zesty",
]

NOUNS = [
    "acorn", "anchor", "badger", "banjo", "beacon", "biscuit", "bison", "canyon",
    "cactus", "comet", "compass", "coyote", "crayon", "dragon", "falcon", "ferret",
    "fiddle", "garden", "gecko", "glacier", "harbor", "hedgehog", "island", "jackal",
    "kettle", "koala", "lantern", "lemur", "lobster", "meadow", "meteor", "moose",
    "muffin", "narwhal", "otter", "owl", "panda", "parrot", "pebble", "pepper",
    "pickle", "pigeon", "puffin", "quartz", "raccoon", "rocket", "saddle", "salmon",
    "sparrow", "squid", "teapot", "thistle", "tiger", "trumpet", "tulip", "turnip",
    "violin", "walrus", "willow", "wombat", "zebra",
]


def adjective() -> str:
    return secrets.choice(ADJECTIVES)


def noun() -> str:
    return secrets.choice(NOUNS)
