class BytecodeProgram:
    def __init__(self):
        self.instructions = []   # list of (OPCODE, arg)

    def emit(self, opcode, arg=None):
        # returns instruction index
        self.instructions.append((opcode, arg))
        return len(self.instructions) - 1

    def __len__(self):
        return len(self.instructions)

    def __iter__(self):
        return iter(self.instructions)
