# SPDX-FileCopyrightText: 2023 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Cooperative execution of the work-items of a single work-group.

Every work-item of a work-group runs inside its own greenlet on the calling
thread. A scheduler, the greenlet that called :meth:`WorkGroupExecution.run`,
owns the rotation: it resumes one work-item at a time, and the work-item runs
until it either returns or enters a collective operation. A collective
operation switches back to the scheduler, which resumes the participants only
once every one of them reached the same collective operation:

- :meth:`WorkGroupExecution.barrier` waits for the whole work-group and backs
  :func:`numba_reduce.kernel_api.group_barrier`.
- :meth:`WorkGroupExecution.shift_left` waits for the sub-group of the caller
  only and backs :func:`numba_reduce.kernel_api.shift_group_left`. Work-items
  of a sub-group therefore advance in lock-step between two shuffles without
  any work-group barrier, which is the guarantee the hardware gives to the
  lanes of a warp.

Work-items are only ever switched to from the scheduler, so the stack depth
does not grow with the size of the work-group.
"""

from collections import deque

from greenlet import getcurrent, greenlet

_BARRIER = "group_barrier"
_SHUFFLE = "shift_group_left"


class WorkItemDivergenceError(RuntimeError):
    """Raised when work-items wait in a collective operation that some other
    work-item of the work-group (or sub-group) never reaches.

    All work-items of a work-group (or sub-group) must reach the same sequence
    of collective operations. On real hardware breaking that rule deadlocks
    or produces undefined results.
    """


class WorkGroupExecution:
    """Scheduling state of one work-group executing a kernel.

    Args:
        size (int): Number of work-items in the work-group.
        sub_group_size (int): Maximum number of work-items in a sub-group.
            Sub-groups are formed from consecutive local linear ids.
    """

    def __init__(self, size, sub_group_size):
        if size <= 0:
            raise ValueError("A work-group needs at least one work-item.")
        if sub_group_size <= 0:
            raise ValueError("A sub-group needs at least one work-item.")
        self.size = size
        self.sub_group_size = min(sub_group_size, size)
        self._scheduler = None
        self._current = 0
        self._exchange = [None] * size

    @property
    def current(self):
        """Local linear id of the work-item that is executing."""
        return self._current

    def sub_group_bounds(self, local_linear_id):
        """Returns the first local linear id and the number of work-items of
        the sub-group containing ``local_linear_id``.
        """
        base = local_linear_id - local_linear_id % self.sub_group_size
        return base, min(self.sub_group_size, self.size - base)

    def run(self, work_items):
        """Executes the work-items until every one of them returned.

        Args:
            work_items (list): One zero-argument callable per work-item,
                ordered by local linear id.

        Raises:
            ValueError: If the number of callables does not match the
                work-group size.
            WorkItemDivergenceError: If work-items are left waiting in a
                collective operation the other participants never reach.
        """
        if len(work_items) != self.size:
            raise ValueError(
                f"Expected {self.size} work-items, got {len(work_items)}."
            )
        self._scheduler = getcurrent()
        tasks = [greenlet(fn, parent=self._scheduler) for fn in work_items]
        waiting = [None] * self.size
        at_barrier = 0
        at_shuffle = {}
        ready = deque(range(self.size))

        try:
            while ready:
                idx = ready.popleft()
                self._current = idx
                collective = tasks[idx].switch()
                if tasks[idx].dead:
                    continue
                waiting[idx] = collective
                if collective == _BARRIER:
                    at_barrier += 1
                    if at_barrier == self.size:
                        at_barrier = 0
                        ready.extend(range(self.size))
                else:
                    base, count = self.sub_group_bounds(idx)
                    at_shuffle[base] = at_shuffle.get(base, 0) + 1
                    if at_shuffle[base] == count:
                        at_shuffle[base] = 0
                        # Lanes resume in ascending order, see shift_left
                        ready.extend(range(base, base + count))

            stuck = [i for i, task in enumerate(tasks) if not task.dead]
            if stuck:
                raise WorkItemDivergenceError(
                    f"Work-item {stuck[0]} waits in {waiting[stuck[0]]} that "
                    "other work-items exited the kernel without reaching."
                )
        finally:
            self._scheduler = None

    def _wait(self, collective):
        self._scheduler.switch(collective)

    def barrier(self):
        """Blocks the calling work-item until all work-items of the work-group
        called the barrier.
        """
        if self.size > 1:
            self._wait(_BARRIER)

    def shift_left(self, value, delta):
        """Returns ``value`` as held by the work-item ``delta`` lanes ahead in
        the caller's sub-group. Lanes with no such work-item get their own
        ``value`` back.
        """
        me = self._current
        base, count = self.sub_group_bounds(me)
        lane = me - base
        self._exchange[me] = value
        if count > 1:
            self._wait(_SHUFFLE)
        # Lanes below the caller already resumed and may have overwritten
        # their slots with the next shuffle, lanes above it have not.
        if 0 < delta and lane + delta < count:
            return self._exchange[me + delta]
        return value
