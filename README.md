# nachosim

A simulated machine for teaching operating systems. The package has a
little-endian MIPS R2000/R3000 processor, paged memory behind an MMU that
uses either a linear page table or a software-managed TLB, a disk addressed
by sector with seek and rotation timing, a hardware timer, and an interrupt
controller that keeps simulated time.

It also has the small data structures that a kernel built on top of it
needs: an ordered `ItemList`, a fixed-size `Table` of slots, a `Bitmap` for
allocating pages or sectors, and `Debug` output that is switched on per flag.

## Installing

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `nachosim.utility`: `div_round_up`, `div_round_down`, `sep_path` (splits a path into its directory part and its final name), and `get_file_path` (splits off the first path component).
- `nachosim.itemlist`: `ItemList`. It works as a plain list through `append`, `prepend`, `head` and `pop`. It can also be kept in key order through `sorted_insert` and `sorted_pop`.
- `nachosim.table`: `Table`. It maps small non-negative integers to items and reuses the lowest freed index. It holds 20 entries by default and raises `TableFullError` when it is full.
- `nachosim.bitmap`: `Bitmap`, with `mark`, `clear`, `test`, `find` (sets the lowest clear bit and returns its index, or `None` when every bit is set) and `count_clear`. `to_bytes` and `load_bytes` save and restore its little-endian 32-bit words.
- `nachosim.endianness`: `word_to_host`, `short_to_host`, `word_to_machine` and `short_to_machine`.
- `nachosim.debug`: `Debug` and `DebugOpts`, plus a process-wide `debug` instance. A message is printed only when its flag is in `flags`. The flag `+` enables every message.
- `nachosim.statistics`: `Statistics`, which holds the tick and I/O counters. Its `report()` and `dump()` give the shutdown summary. The module also defines the timing constants `USER_TICK`, `SYSTEM_TICK`, `ROTATION_TIME`, `SEEK_TIME`, `CONSOLE_TIME` and `TIMER_TICKS`.
- `nachosim.encoding`: `OpCode`, `Format`, `RegType`, `OpInfo` and `OpString`, the tables `OP_TABLE`, `SPECIAL_TABLE` and `OP_STRINGS`, and `index_to_addr`.
- `nachosim.interrupt`: `Interrupt`, `PendingInterrupt`, `IntStatus`, `IntType` and `MachineStatus`.
  - `Interrupt.schedule` queues a handler a given number of ticks ahead.
  - `one_tick`, `set_level`, `enable` and `idle` advance time and fire the handlers that are due.
  - `halt` prints the statistics and raises `MachineHalted`.
- `nachosim.timer`: `Timer`. It calls a handler every `TIMER_TICKS` ticks, or after random delays when `do_random` is set.
- `nachosim.instruction`: `Instruction`, with `Instruction.decode(word)`, `reg_from_type` and `disassemble`.
- `nachosim.exception_type`: `ExceptionType` and `exception_type_to_string`.
- `nachosim.translation_entry`: `TranslationEntry`, which serves both as a page-table entry and as a TLB entry.
- `nachosim.disk`: `Disk`, a disk stored in a host file that starts with a magic number, and `DiskError`.
  - It has `read_request`, `write_request` and `compute_latency`.
  - Completion is announced through a `DISK_INT` interrupt.
  - It can be used as a context manager.
- `nachosim.mmu`: `MMU`, with `read_mem`, `write_mem`, `tlb_load_entry` (round-robin replacement) and `dump_tlb`.
  - A failed translation raises `TranslationError`, which carries the `ExceptionType` and the faulting address.
  - Each translation attempt is counted in the statistics' `num_disk_reads` or `num_disk_writes`.
- `nachosim.machine`: `Machine` and `SingleStepper`.
  - `Machine` holds the 40 registers, the main memory, the MMU and the exception handlers.
  - It provides `read_register`, `write_register`, `read_mem`, `write_mem`, `raise_exception`, `set_handler` and `delayed_load`.
  - The module also defines the register numbers: `PC_REG`, `NEXT_PC_REG`, `HI_REG`, `LO_REG`, `STACK_REG` and the rest.
- `nachosim.mips_sim`: `Simulator`, with `fetch_instruction`, `exec_instruction` and `run(max_steps)`. The module also has `mult`, the 32×32→64-bit multiply, which returns `(hi, lo)`.

## Examples

Decode an instruction:

```python
from nachosim.instruction import Instruction

instr = Instruction.decode(0x20420005)   # addi r2, r2, 5
print(instr.disassemble())               # ADDI r2,r2,5
```

Allocate from a bitmap:

```python
from nachosim.bitmap import Bitmap

pages = Bitmap(32)
frame = pages.find()        # 0, and that bit is now marked
print(pages.count_clear())  # 31
```

Run one user instruction on the machine:

```python
from nachosim.machine import Machine, NEXT_PC_REG
from nachosim.mips_sim import Simulator
from nachosim.translation_entry import TranslationEntry

machine = Machine(num_physical_pages=4)
machine.mmu.page_table = [
    TranslationEntry(virtual_page=i, physical_page=i, valid=True) for i in range(4)
]
machine.mmu.write_mem(0, 4, 0x20420005)   # addi r2, r2, 5 at address 0
machine.write_register(NEXT_PC_REG, 4)

Simulator(machine).run(max_steps=1)
print(machine.read_register(2))           # 5
```

## What the package does not do

- It is a library. It installs no command.
- It has no kernel. There are no threads, scheduler, system calls, address-space loader or file system. Exceptions raised by user code are passed to handlers that the caller registers with `Machine.set_handler`. If no handler is registered, `raise_exception` raises `RuntimeError`.
- It has no console device and no network device.
- The partial-word instructions `LWL`, `LWR`, `SWL` and `SWR` accept only word-aligned addresses. Any other address raises `RuntimeError`.