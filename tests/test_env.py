from keyten.env import Env
from keyten.values import Kind, alloc_atom, alloc_vec, decode_sym, encode_sym


def test_new_env_is_empty():
    env = Env()
    assert len(env) == 0
    assert list(env) == []


def test_bind_then_lookup():
    env = Env()
    x = encode_sym("x")
    v = alloc_vec(Kind.I64, [1, 2, 3])
    env.bind(x, v)
    assert env.lookup(x) is v
    assert len(env) == 1


def test_lookup_missing_returns_none():
    env = Env()
    assert env.lookup(encode_sym("nope")) is None


def test_rebind_replaces():
    env = Env()
    x = encode_sym("x")
    env.bind(x, alloc_atom(Kind.I64, 1))
    new = alloc_atom(Kind.I64, 2)
    env.bind(x, new)
    assert env.lookup(x) is new
    assert len(env) == 1


def test_unbind_removes_and_ignores_missing():
    env = Env()
    x = encode_sym("x")
    env.bind(x, alloc_atom(Kind.I64, 1))
    env.unbind(x)
    env.unbind(x)
    assert env.lookup(x) is None
    assert len(env) == 0


def test_iteration_yields_all_pairs():
    env = Env()
    names = ["a", "bb", "ccc"]
    for i, n in enumerate(names):
        env.bind(encode_sym(n), alloc_atom(Kind.I64, i))
    pairs = {decode_sym(s): v.data for s, v in env}
    assert pairs == {n: i for i, n in enumerate(names)}


def test_unbind_leaves_other_bindings():
    env = Env()
    x = encode_sym("x")
    y = encode_sym("y")
    vy = alloc_atom(Kind.I64, 7)
    env.bind(x, alloc_atom(Kind.I64, 1))
    env.bind(y, vy)
    env.unbind(x)
    assert env.lookup(x) is None
    assert env.lookup(y) is vy
    assert len(env) == 1