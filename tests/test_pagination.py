import unittest

from app.services.pagination import MAX_PAGE_SIZE, page_window, paginate


class TestPageWindow(unittest.TestCase):
    def test_offset(self):
        self.assertEqual(page_window(3, 10), (3, 10, 20))

    def test_clamping(self):
        self.assertEqual(page_window(0, 0), (1, 1, 0))
        self.assertEqual(page_window(-5, 1000), (1, MAX_PAGE_SIZE, 0))


class TestPaginate(unittest.TestCase):
    items = list(range(23))

    def test_first_page(self):
        page, meta = paginate(self.items, 1, 10)
        self.assertEqual(page, list(range(10)))
        self.assertEqual(meta["total_pages"], 3)
        self.assertTrue(meta["has_next_page"])
        self.assertFalse(meta["has_previous_page"])

    def test_last_partial_page(self):
        page, meta = paginate(self.items, 3, 10)
        self.assertEqual(page, [20, 21, 22])
        self.assertFalse(meta["has_next_page"])
        self.assertTrue(meta["has_previous_page"])

    def test_past_the_end(self):
        page, meta = paginate(self.items, 9, 10)
        self.assertEqual(page, [])
        self.assertEqual(meta["current_page"], 9)
        self.assertFalse(meta["has_next_page"])

    def test_empty(self):
        page, meta = paginate([], 1, 20)
        self.assertEqual(page, [])
        self.assertEqual(meta["total_pages"], 0)
        self.assertFalse(meta["has_next_page"])


if __name__ == '__main__':
    unittest.main()
