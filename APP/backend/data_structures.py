"""Core data structures for Flight Reservation System"""
from typing import Dict, Iterator, List, Optional, Set


class Node:
    """Arena slot for the doubly linked reservation list"""
    __slots__ = ('data', 'prev', 'next')

    def __init__(self, data):
        self.data = data
        self.prev = None
        self.next = None


class ReservationList:
    """Doubly linked list kept in ascending booking_time order.

    Nodes live in an arena keyed by integer handles; ``prev``/``next`` hold
    handles rather than node references.
    """

    def __init__(self):
        self.head: Optional[int] = None
        self.tail: Optional[int] = None
        self._nodes: Dict[int, Node] = {}
        self._next_handle = 0

    def __len__(self):
        return len(self._nodes)

    def __iter__(self) -> Iterator:
        current = self.head
        while current is not None:
            node = self._nodes[current]
            yield node.data
            current = node.next

    def _allocate(self, data) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._nodes[handle] = Node(data)
        return handle

    def insert_sorted(self, data) -> int:
        """Insert after every node whose booking_time is <= data.booking_time"""
        handle = self._allocate(data)
        new_node = self._nodes[handle]

        if self.head is None or data.booking_time < self._nodes[self.head].data.booking_time:
            new_node.next = self.head
            if self.head is not None:
                self._nodes[self.head].prev = handle
            else:
                self.tail = handle
            self.head = handle
            return handle

        current = self.head
        while True:
            following = self._nodes[current].next
            if following is None or self._nodes[following].data.booking_time > data.booking_time:
                break
            current = following

        following = self._nodes[current].next
        new_node.prev = current
        new_node.next = following
        self._nodes[current].next = handle
        if following is not None:
            self._nodes[following].prev = handle
        else:
            self.tail = handle
        return handle

    def delete_by_id(self, reservation_id):
        """Unlink the first node with a matching id and return its record"""
        current = self.head
        while current is not None:
            node = self._nodes[current]
            if node.data.id == reservation_id:
                if node.prev is not None:
                    self._nodes[node.prev].next = node.next
                else:
                    self.head = node.next
                if node.next is not None:
                    self._nodes[node.next].prev = node.prev
                else:
                    self.tail = node.prev
                del self._nodes[current]
                return node.data
            current = node.next
        return None

    def find_by_id(self, reservation_id):
        """Search for a record by id"""
        for record in self:
            if record.id == reservation_id:
                return record
        return None

    def get_all(self) -> List:
        """Get all records as list, head to tail"""
        return list(self)

    def first(self):
        """Record at the head, or None"""
        if self.head is None:
            return None
        return self._nodes[self.head].data

    def is_empty(self):
        """Check if list is empty"""
        return self.head is None

    # Merge sort

    def sort_by_date(self):
        """Merge sort the list in place by booking_time (stable)"""
        self.head = self._merge_sort(self.head)

        # Rebuild back links and tail from the sorted forward chain
        previous = None
        current = self.head
        while current is not None:
            self._nodes[current].prev = previous
            previous = current
            current = self._nodes[current].next
        self.tail = previous

    def _split(self, start: int) -> Optional[int]:
        """Cut the chain at its midpoint and return the head of the second half"""
        slow = start
        fast = self._nodes[start].next
        while fast is not None and self._nodes[fast].next is not None:
            slow = self._nodes[slow].next
            fast = self._nodes[self._nodes[fast].next].next
        second = self._nodes[slow].next
        self._nodes[slow].next = None
        return second

    def _merge_sort(self, start: Optional[int]) -> Optional[int]:
        if start is None or self._nodes[start].next is None:
            return start
        second = self._split(start)
        return self._merge(self._merge_sort(start), self._merge_sort(second))

    def _merge(self, left: Optional[int], right: Optional[int]) -> Optional[int]:
        head = None
        last = None
        while left is not None and right is not None:
            # Left wins ties
            if self._nodes[right].data.booking_time < self._nodes[left].data.booking_time:
                chosen, right = right, self._nodes[right].next
            else:
                chosen, left = left, self._nodes[left].next
            if last is None:
                head = chosen
            else:
                self._nodes[last].next = chosen
            last = chosen

        remainder = left if left is not None else right
        if last is None:
            return remainder
        self._nodes[last].next = remainder
        return head


class SeatIndex:
    """Hash table of available seats per flight"""

    def __init__(self):
        self.seats: Dict[str, Set[str]] = {}

    def set_availability(self, flight_number: str, seat_number: str, available: bool) -> bool:
        """Mark a seat available or unavailable.

        Returns False only when asked to mark unavailable a seat that was
        not marked available.
        """
        flight_seats = self.seats.setdefault(flight_number, set())
        if available:
            flight_seats.add(seat_number)
            return True
        if seat_number in flight_seats:
            flight_seats.remove(seat_number)
            return True
        return False

    def is_available(self, flight_number: str, seat_number: str) -> bool:
        return seat_number in self.seats.get(flight_number, ())

    def available_seats(self, flight_number: str) -> List[str]:
        """Get available seats for a flight, sorted"""
        return sorted(self.seats.get(flight_number, ()))

    def has_flight(self, flight_number: str) -> bool:
        return flight_number in self.seats
