"""HTTP surface of shopcache."""
