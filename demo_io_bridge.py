#!/usr/bin/env python3
"""
Demo: IO operators end to end.

1. Run external commands (plain, with env overrides, from a template)
2. Serialize a value with each registered backend and read it back
3. Show the environment snapshot
"""

import logging
import os
import tempfile

from iobridge.context import IOContext
from iobridge.operators import IOOperators
from iobridge.values import TupleValue, RecordValue, StringValue, IntValue, BoolValue, ppr


def main():
    logging.basicConfig(level=logging.INFO)
    ops = IOOperators(IOContext.create())

    print("=" * 80)
    print("IO BRIDGE DEMO")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Processes
    # =========================================================================
    print("\n1. RUNNING PROCESSES...")
    cmd = TupleValue.of(StringValue("echo"), StringValue("hello"))
    print(f"   IOExec({ppr(cmd)}) = {ppr(ops.call('IOExec', cmd))}")

    env = RecordValue.of({"GREETING": StringValue("bonjour")})
    cmd = TupleValue.of(StringValue("printenv"), StringValue("GREETING"))
    print(f"   IOEnvExec = {ppr(ops.call('IOEnvExec', env, cmd))}")

    template = TupleValue.of(StringValue("echo"), StringValue("%s-%s"))
    params = TupleValue.of(StringValue("a"), StringValue("b"))
    print(f"   IOExecTemplate = {ppr(ops.call('IOExecTemplate', template, params))}")

    # =========================================================================
    # STEP 2: Serializers
    # =========================================================================
    print("\n2. SERIALIZING...")
    value = RecordValue.of({
        "name": StringValue("demo"),
        "count": IntValue(3),
        "items": TupleValue.of(IntValue(1), IntValue(2), IntValue(3)),
        "done": BoolValue(False),
    })
    options = RecordValue.of({"compress": BoolValue(True)})
    with tempfile.TemporaryDirectory() as tmp:
        for type_name in ops.context.registry.types():
            path = os.path.join(tmp, f"value.{type_name.lower()}")
            ops.call("Serialize", value, StringValue(path), StringValue(type_name), options)
            back = ops.call("Deserialize", StringValue(path), StringValue(type_name), options)
            print(f"   {type_name}: round-trip equal = {back == value}")

    # =========================================================================
    # STEP 3: Environment
    # =========================================================================
    print("\n3. ENVIRONMENT...")
    snapshot = ops.call("IOEnv")
    print(f"   {len(snapshot)} variables captured")
    print(f"   PATH = {ppr(snapshot.get('PATH') or StringValue(''))}")

    print("\n" + "=" * 80)


if __name__ == "__main__":
    main()
