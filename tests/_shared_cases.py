"""Centralized Rust source cases used across lexer/parser/lint tests."""

from __future__ import annotations

from dataclasses import dataclass
import textwrap


@dataclass(frozen=True, slots=True)
class RustCase:
    name: str
    source: str
    should_parse_cleanly: bool = True


def _dedent(text: str) -> str:
    return textwrap.dedent(text).lstrip()


PARSER_CASES: tuple[RustCase, ...] = (
    RustCase(
        name="use_declarations",
        source=_dedent(
            """
            use std::collections::HashMap;
            use std::io::{self, Read, Write as W};
            use crate::a::*;
            use ::core::fmt;
            pub(crate) use super::b;
            """
        ),
    ),
    RustCase(
        name="struct_and_impl",
        source=_dedent(
            """
            #[derive(Debug, Clone)]
            pub struct Point<T> {
                pub x: T,
                y: T,
            }

            impl<T: Copy> Point<T> {
                pub fn new(x: T, y: T) -> Self {
                    Point { x: x, y }
                }

                fn x(&self) -> &T {
                    &self.x
                }
            }
            """
        ),
    ),
    RustCase(
        name="enum_and_match",
        source=_dedent(
            """
            enum Shape {
                Circle(f64),
                Rect { w: f64, h: f64 },
                Empty,
            }

            fn area(shape: &Shape) -> f64 {
                match shape {
                    Shape::Circle(r) => 3.14 * r * r,
                    Shape::Rect { w, h } => w * h,
                    Shape::Empty => 0.0,
                }
            }
            """
        ),
    ),
    RustCase(
        name="control_flow_and_closures",
        source=_dedent(
            """
            fn main() {
                let mut total = 0;
                for i in 0..10 {
                    if i % 2 == 0 && i > 2 {
                        total += i << 1;
                    } else {
                        continue;
                    }
                }
                while total > 100 {
                    total -= 1;
                }
                let v: Vec<u32> = vec![1, 2, 3];
                let doubled = v.iter().map(|x| x * 2).collect::<Vec<_>>();
                println!("{} {:?}", total, doubled);
            }
            """
        ),
    ),
    RustCase(
        name="traits_generics_and_lifetimes",
        source=_dedent(
            """
            pub trait Named: Send + Sync {
                fn area(&self) -> f64;
                fn name(&self) -> String {
                    String::from("shape")
                }
            }

            fn longest<'a>(a: &'a str, b: &'a str) -> &'a str {
                if a.len() > b.len() { a } else { b }
            }

            fn apply<F>(f: F) -> i32 where F: Fn(i32) -> i32 {
                f(1)
            }
            """
        ),
    ),
    RustCase(
        name="module_items_and_expressions",
        source=_dedent(
            """
            const MAX: usize = 10;
            static mut COUNTER: u32 = 0;
            type Pair = (i32, i32);

            mod inner {
                pub fn f(x: i32) -> Result<i32, String> {
                    let y = x as i64;
                    let arr = [0u8; 4];
                    let (a, b) = (1, 2);
                    'outer: loop {
                        break 'outer;
                    }
                    let r = parse(x)?;
                    Ok(r + a + b + y as i32 + arr[0] as i32)
                }
            }
            """
        ),
    ),
    RustCase(
        name="missing_semicolon_after_use",
        source="use a::b\n",
        should_parse_cleanly=False,
    ),
    RustCase(
        name="unclosed_use_list",
        source="use a::{b, c;\nfn f() {}\n",
        should_parse_cleanly=False,
    ),
    RustCase(
        name="garbage_between_items",
        source="fn f() {}\n) ) =>\nstruct S;\n",
        should_parse_cleanly=False,
    ),
    RustCase(
        name="unterminated_string",
        source='fn f() { let s = "abc; }\n',
        should_parse_cleanly=False,
    ),
)


CLEAN_CASES: tuple[RustCase, ...] = tuple(case for case in PARSER_CASES if case.should_parse_cleanly)
BROKEN_CASES: tuple[RustCase, ...] = tuple(case for case in PARSER_CASES if not case.should_parse_cleanly)


def case_id(case: RustCase) -> str:
    return case.name
